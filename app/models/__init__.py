from app.models.agent import Agent  # noqa: F401
from app.models.client import Client  # noqa: F401
from app.models.evaluation import AgentEvaluation  # noqa: F401
from app.models.performance import (  # noqa: F401
    DailyPerformance,
    MonthlyBaseEquity,
    MonthlyPerformance,
    MonthlyReset,
)
from app.models.product import Product  # noqa: F401
from app.models.team_settings import TeamSettings  # noqa: F401
