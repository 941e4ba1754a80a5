"""Utility that launches a sample MongoDB Docker container for mongorun."""

from __future__ import annotations

import argparse
import subprocess
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from mongorun.config import CONFIG_FILE

DEFAULT_CONTAINER = "mongorun-sample-db"
DEFAULT_PORT = 27037
DEFAULT_DB = "mongorun_demo"
DEFAULT_USER = "mongorun"
DEFAULT_PASSWORD = "mongorun"
# Server-side eval was removed in MongoDB 4.2.
DOCKER_IMAGE = "mongo:4.0"


def run(cmd: list[str], *, check: bool = True, **kwargs) -> subprocess.CompletedProcess[str]:
    print("$", " ".join(cmd))
    return subprocess.run(cmd, check=check, text=True, **kwargs)


def container_exists(name: str) -> bool:
    result = subprocess.run(
        ["docker", "ps", "-a", "--filter", f"name={name}", "--format", "{{.ID}}"],
        text=True,
        capture_output=True,
    )
    return bool(result.stdout.strip())


def start_container(name: str, port: int) -> None:
    if container_exists(name):
        print(f"Container '{name}' already exists. Reusing it.")
        run(["docker", "start", name], check=False)
    else:
        run(["docker", "run", "-d", "--name", name, "-p", f"{port}:27017", DOCKER_IMAGE])
    wait_for_start(name)


def wait_for_start(name: str, retries: int = 15, delay: float = 1.0) -> None:
    for _ in range(retries):
        result = subprocess.run(
            ["docker", "exec", name, "mongo", "--quiet", "--eval", "db.adminCommand('ping').ok"],
            text=True,
            capture_output=True,
        )
        if result.returncode == 0 and result.stdout.strip() == "1":
            return
        time.sleep(delay)
    print("Warning: database did not report ready state; continuing anyway.")


def create_user(name: str, database: str, user: str, password: str) -> None:
    script = (
        f"var target = db.getSiblingDB('{database}');"
        f"if (!target.getUser('{user}')) {{"
        f"  target.createUser({{user: '{user}', pwd: '{password}', roles: ['dbOwner']}});"
        "}"
    )
    run(["docker", "exec", "-i", name, "mongo", "--quiet", "--eval", script])


def render_config(port: int, database: str, user: str, password: str, directory: str) -> str:
    return "\n".join(
        [
            'script_encoding = "utf-8"',
            f'training_directories = ["{directory}"]',
            "",
            "[connection]",
            'hostname = "localhost"',
            f"port = {port}",
            f'database = "{database}"',
            f'user_name = "{user}"',
            f'password = "{password}"',
            "",
            "[connection.options]",
            "serverSelectionTimeoutMS = 5000",
            "",
        ]
    )


def write_config(path: Path, contents: str, *, force: bool = False) -> bool:
    if path.exists() and not force:
        print(f"{path} already exists; leaving as-is (use --force to overwrite).")
        return False
    path.write_text(contents)
    print(f"Wrote {path}.")
    return True


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--container", default=DEFAULT_CONTAINER, help="Docker container name")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Host port to expose MongoDB on")
    parser.add_argument("--database", default=DEFAULT_DB, help="Database the scripts will target")
    parser.add_argument("--user", default=DEFAULT_USER, help="Database user to create")
    parser.add_argument("--password", default=DEFAULT_PASSWORD, help="Password for the database user")
    parser.add_argument("--scripts", default="examples/training", help="Training directory written to the config")
    parser.add_argument("--config", type=Path, default=CONFIG_FILE, help="Config file to write")
    parser.add_argument("--force", action="store_true", help="Overwrite an existing config file")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or sys.argv[1:])
    try:
        start_container(args.container, args.port)
        create_user(args.container, args.database, args.user, args.password)
    except FileNotFoundError:
        print("Docker is not installed or not on PATH.")
        return 1
    write_config(
        args.config,
        render_config(args.port, args.database, args.user, args.password, args.scripts),
        force=args.force,
    )
    print(f"Sample database is ready. Run: python -m mongorun --config {args.config} training")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
