"""
Motifs de rejet d'un marquage de point de contrôle.

Chaque rejet porte un code stable (renvoyé tel quel à l'app mobile), le statut
HTTP correspondant et un message lisible par le garde. Les classes héritent de
ValueError pour rester compatibles avec la convention des autres services.
"""

from typing import Any, Dict


class MarkingRejected(ValueError):
    code = "REJECTED"
    status_code = 400

    def to_payload(self) -> Dict[str, Any]:
        return {"success": False, "error": self.code, "message": str(self)}


class NotFoundError(MarkingRejected):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, entity: str, message: str):
        super().__init__(message)
        self.entity = entity  # "round" ou "checkpoint"

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload["entity"] = self.entity
        return payload


class MissingLocationError(MarkingRejected):
    code = "MISSING_LOCATION"

    def __init__(self):
        super().__init__("La position GPS est requise pour valider ce point.")


class OutOfRangeError(MarkingRejected):
    code = "OUT_OF_RANGE"

    def __init__(self, distance_meters: float, tolerance_meters: float):
        super().__init__(
            f"Vous êtes hors de la zone autorisée ({round(distance_meters)} m). "
            "Rapprochez-vous du point."
        )
        self.distance_meters = distance_meters
        self.tolerance_meters = tolerance_meters

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload["distance_meters"] = round(self.distance_meters)
        payload["tolerance_meters"] = self.tolerance_meters
        return payload


class RouteMismatchError(MarkingRejected):
    code = "ROUTE_MISMATCH"

    def __init__(self):
        super().__init__("Ce point n'appartient pas à la ronde en cours.")


class OutOfOrderError(MarkingRejected):
    code = "OUT_OF_ORDER"

    def __init__(self):
        super().__init__("Ordre incorrect : marquez d'abord le point précédent.")


class DuplicateMarkError(MarkingRejected):
    code = "DUPLICATE_MARK"

    def __init__(self):
        super().__init__("Ce point a déjà été marqué pendant cette ronde.")


class StoreFailureError(MarkingRejected):
    code = "STORE_FAILURE"
    status_code = 500

    def __init__(self, message: str = "Erreur lors de l'enregistrement du marquage."):
        super().__init__(message)
