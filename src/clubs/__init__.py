from .models import Activity, AppState, SignupForm
from .client import ActivitiesClient, ActionResult
from .controller import ActivitiesController
from .config import Config

__version__ = "0.1.0"
