"""
Local stand-in for the user service.

Serves `GET /users/{user_id}`: known users answer 200 with `{"id", "name"}`,
everything else answers 404. Point USER_SERVICE_URL at it during development:

    python scripts/mock_user_service.py --port 8080
    USER_SERVICE_URL=http://localhost:8080/users uvicorn api.main:app --port 8081
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path so we can import from domain
sys.path.insert(0, str(Path(__file__).parent.parent))

import uvicorn
from fastapi import FastAPI, HTTPException

from domain.user import User

KNOWN_USERS = {
    "user123": User(id="user123", name="Test User 123"),
    "u1": User(id="u1", name="Demo User"),
}


def create_mock_app(users: dict[str, User] = KNOWN_USERS) -> FastAPI:
    app = FastAPI(title="Mock User Service")

    @app.get("/users/{user_id}")
    def get_user(user_id: str):
        user = users.get(user_id)
        if user is None:
            raise HTTPException(status_code=404, detail="User not found")
        return {"id": user.id, "name": user.name}

    return app


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a mock user service")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8080)
    args = parser.parse_args()

    print(f"Mock user service on http://{args.host}:{args.port}/users")
    print(f"Known users: {', '.join(sorted(KNOWN_USERS))}")
    uvicorn.run(create_mock_app(), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
