"""Operator CLI for controller API keys.

Examples:
    python scripts/manage_controller_keys.py create "Main Entrance"
    python scripts/manage_controller_keys.py list
    python scripts/manage_controller_keys.py revoke <key-id>

The secret is printed once, on create. Revocation cannot be undone.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Issue, list and revoke door controller API keys.')
    sub = parser.add_subparsers(dest='command', required=True)

    create = sub.add_parser('create', help='Issue a new key for a controller.')
    create.add_argument('controller_name')

    revoke = sub.add_parser('revoke', help='Permanently deactivate a key.')
    revoke.add_argument('key_id')

    sub.add_parser('list', help='List keys, newest first.')
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    from app import create_app
    from services.controller_keys import (
        ControllerKeyError,
        issue_controller_key,
        list_controller_keys,
        revoke_controller_key,
    )

    app = create_app()
    with app.app_context():
        try:
            if args.command == 'create':
                key = issue_controller_key(args.controller_name)
                print(f'id:         {key.id}')
                print(f'controller: {key.controller_name}')
                print(f'api_key:    {key.api_key}')
            elif args.command == 'revoke':
                key = revoke_controller_key(args.key_id)
                print(f'revoked {key.id} ({key.controller_name})')
            else:
                for key in list_controller_keys():
                    state = 'active' if key.is_active else 'revoked'
                    print(f'{key.id}  {key.key_hint:<10} {state:<8} {key.created_at:%Y-%m-%d %H:%M}  {key.controller_name}')
        except ControllerKeyError as exc:
            print(f'error: {exc.message}', file=sys.stderr)
            return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
