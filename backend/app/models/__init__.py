# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant que SQLAlchemy tente de résoudre les clés étrangères inter-modèles
# (ex. rounds.guard_id → guards.id, checkpoints.route_id → routes.id).

from app.models.guard import Guard  # noqa: F401 : doit précéder les tables qui le référencent
from app.models.post import Post, Shift  # noqa: F401
from app.models.route import Route, Checkpoint  # noqa: F401
from app.models.round import Round, Marking, RoundStatus  # noqa: F401
from app.models.activity import PresenceCheck, LogbookEntry, PanicAlert  # noqa: F401
from app.models.notification import Notification  # noqa: F401
