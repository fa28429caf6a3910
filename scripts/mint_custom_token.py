"""Utility script to issue a custom sign-in token for a console user."""

from __future__ import annotations

import argparse
from datetime import timedelta

from govconsole.infrastructure.security import create_custom_token


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for token issuance."""

    parser = argparse.ArgumentParser(
        description="Issue a custom token that signs a console session in as a fixed user.",
    )
    parser.add_argument(
        "user_id",
        help="Identificador opaco del usuario que usará el token",
    )
    parser.add_argument(
        "--minutes",
        type=int,
        default=60,
        help="Minutos de validez del token (por defecto: 60)",
    )
    return parser.parse_args()


def main() -> None:
    """Print a custom token for the provided user id."""

    args = parse_args()

    user_id = args.user_id.strip()
    if not user_id:
        raise SystemExit("No se proporcionó un identificador de usuario válido.")
    if args.minutes <= 0:
        raise SystemExit("La validez del token debe ser mayor a cero minutos.")

    token = create_custom_token(user_id, expires_delta=timedelta(minutes=args.minutes))
    print(token)


if __name__ == "__main__":
    main()
