"""
Section critique par ronde pour la validation des marquages.

FastAPI exécute les endpoints synchrones dans un pool de threads : deux scans
simultanés sur la même ronde pourraient lire « aucun marquage » avant que l'un
des deux n'écrive. Le verrou sérialise la séquence lecture → décision → écriture
pour une ronde donnée, sans bloquer les autres rondes.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator

_registry_guard = threading.Lock()
_round_locks: Dict[int, threading.Lock] = {}
_round_users: Dict[int, int] = {}  # requêtes qui détiennent ou attendent le verrou


@contextmanager
def round_lock(round_id: int) -> Iterator[None]:
    """Exécute le bloc en exclusion mutuelle avec les autres scans de la même ronde."""
    with _registry_guard:
        lock = _round_locks.setdefault(round_id, threading.Lock())
        _round_users[round_id] = _round_users.get(round_id, 0) + 1
    try:
        with lock:
            yield
    finally:
        with _registry_guard:
            _round_users[round_id] -= 1
            if _round_users[round_id] == 0:
                del _round_users[round_id]
                del _round_locks[round_id]


def active_round_locks() -> int:
    """Nombre de rondes ayant actuellement un verrou enregistré."""
    with _registry_guard:
        return len(_round_locks)
