import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

from app.db import SessionLocal, get_engine
from app.models.agent import Agent
from app.schemas.agent import AgentCreate
from app.services.agents import agents
from app.services.team_settings import team_settings

SAMPLE_AGENTS = [
    ("John Smith", "john.smith@pmex.com", "+92-300-1234567", 0.05),
    ("Sarah Johnson", "sarah.johnson@pmex.com", "+92-301-2345678", 0.04),
    ("Ahmed Ali", "ahmed.ali@pmex.com", "+92-302-3456789", 0.06),
    ("Maria Garcia", "maria.garcia@pmex.com", "+92-303-4567890", 0.05),
]


def parse_args():
    parser = argparse.ArgumentParser(description="Seed team settings and sample agents.")
    parser.add_argument("--skip-agents", action="store_true", help="Only create the team settings row.")
    return parser.parse_args()


def main():
    load_dotenv()
    args = parse_args()
    db = SessionLocal(bind=get_engine())
    try:
        row = team_settings.get(db)
        print(f"Team settings: threshold={row.commission_threshold_pkr} target={row.nots_target_per_client}")
        if args.skip_agents:
            return
        for name, email, phone, rate in SAMPLE_AGENTS:
            if db.query(Agent).filter(Agent.email == email).first():
                print(f"Agent exists: {email}")
                continue
            agents.create(
                db,
                AgentCreate(name=name, email=email, phone=phone, commission_rate=rate),
                is_admin=True,
            )
            print(f"Agent created: {email}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
