#!/usr/bin/env python3
"""
Command-line interface for the restaurant ordering platform.

Usage:
    python cli.py [command] [options]

Commands:
    demo        Run the client demos against the JSON fixtures
    users       List the fixture users
    test        Run the test suite
    serve       Start the API server

Examples:
    python cli.py demo feed
    python cli.py demo all
    python cli.py serve --reload
"""

import argparse
import subprocess
import sys


def run_demo(scenario: str) -> None:
    """Run a demo scenario."""
    from shared.config import configure_logging, get_settings

    configure_logging(get_settings())

    if scenario == "cart":
        from client.demo import run_cart_demo
        run_cart_demo()
    elif scenario == "feed":
        from client.demo import run_feed_demo
        run_feed_demo()
    elif scenario == "all":
        from client.demo import run_cart_demo, run_feed_demo
        run_cart_demo()
        run_feed_demo()
    else:
        print(f"Unknown scenario: {scenario}")
        sys.exit(1)


def list_users(data_store=None) -> None:
    """Print the fixture users and the X-User-Id to send for each."""
    from shared.data_store import get_data_store

    data_store = data_store or get_data_store()
    print(f"{'X-User-Id':<10} {'Public id':<14} {'Role':<9} Name")
    for user in data_store.get_users():
        role = "admin" if user.is_admin else "customer"
        print(f"{user.user_id:<10} {user.public_id:<14} {role:<9} {user.name}")


def run_tests(args: list[str]) -> None:
    """Run the test suite."""
    cmd = [sys.executable, "-m", "pytest"] + args
    subprocess.run(cmd)


def run_server(host: str, port: int, reload: bool) -> None:
    """Start the API server."""
    cmd = [sys.executable, "-m", "uvicorn", "api.main:app", f"--host={host}", f"--port={port}"]
    if reload:
        cmd.append("--reload")

    print(f"Starting server at http://{host}:{port}")
    print(f"API docs available at http://{host}:{port}/docs")
    subprocess.run(cmd)


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Restaurant ordering platform CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo cart
  %(prog)s demo feed
  %(prog)s demo all
  %(prog)s users
  %(prog)s test -v
  %(prog)s serve --reload
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run demo scenarios")
    demo_parser.add_argument(
        "scenario",
        choices=["cart", "feed", "all"],
        help="Which scenario to run",
    )

    # Users command
    subparsers.add_parser("users", help="List the fixture users")

    # Test command
    test_parser = subparsers.add_parser("test", help="Run the test suite")
    test_parser.add_argument(
        "pytest_args",
        nargs="*",
        default=[],
        help="Arguments to pass to pytest",
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    args = parser.parse_args()

    if args.command == "demo":
        run_demo(args.scenario)
    elif args.command == "users":
        list_users()
    elif args.command == "test":
        run_tests(args.pytest_args)
    elif args.command == "serve":
        run_server(args.host, args.port, args.reload)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
