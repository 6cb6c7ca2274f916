"""Write SceneBreak's local .env settings and create the database tables."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import dotenv_values, set_key

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from scenebreak import create_app
from scenebreak.extensions import db

SECRET_KEYS = {"SECRET_KEY", "GROQ_API_KEY"}

# CLI option -> environment variable
ENV_OPTIONS = {
    "secret_key": "SECRET_KEY",
    "groq_api_key": "GROQ_API_KEY",
    "llm_model": "LLM_MODEL",
    "database_url": "DATABASE_URL",
}


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--secret-key", help="Secret key for Flask sessions.")
    parser.add_argument("--groq-api-key", help="Credential for the chat completions provider.")
    parser.add_argument("--llm-model", help="Model name sent with each breakdown request.")
    parser.add_argument("--database-url", help="SQLAlchemy database URL.")
    parser.add_argument("--env-path", type=Path, default=REPO_ROOT / ".env")
    parser.add_argument("--skip-db", action="store_true", help="Only update the .env file.")
    return parser.parse_args()


def update_env_file(args: argparse.Namespace) -> dict:
    args.env_path.touch(exist_ok=True)
    set_key(str(args.env_path), "FLASK_APP", "scenebreak:create_app")
    for option, env_name in ENV_OPTIONS.items():
        value = getattr(args, option)
        if value:
            set_key(str(args.env_path), env_name, value)
    return dotenv_values(args.env_path)


def main() -> None:
    args = parse_args()
    env_values = update_env_file(args)

    if args.skip_db:
        print("Database initialization skipped.")
    else:
        app = create_app()
        with app.app_context():
            db.create_all()
            print(f"Database initialized ({app.config['SQLALCHEMY_DATABASE_URI']}).")

    print(f"\n{args.env_path}:")
    for key in sorted(env_values):
        value = "********" if key in SECRET_KEYS else env_values[key]
        print(f"  {key}={value}")


if __name__ == "__main__":
    main()
