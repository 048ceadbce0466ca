#!/usr/bin/env python3
"""
System Health Check Script for Tea Farm Operations.

This script verifies that the configuration is valid and that the REST
backend the client talks to is reachable.

Usage:
    python scripts/doctor.py

Exit codes:
    0: All checks passed
    1: One or more checks failed
"""

import json
import logging
import os
import sys

from dotenv import load_dotenv

load_dotenv()


# ANSI color codes for terminal output
class Colors:
    GREEN = "\033[92m"  # ✓
    RED = "\033[91m"    # ✗
    YELLOW = "\033[93m" # ⚠
    BLUE = "\033[94m"   # ℹ
    BOLD = "\033[1m"
    RESET = "\033[0m"


def print_success(message: str) -> None:
    print(f"{Colors.GREEN}✓{Colors.RESET} {message}")


def print_error(message: str) -> None:
    print(f"{Colors.RED}✗{Colors.RESET} {message}")


def print_warning(message: str) -> None:
    print(f"{Colors.YELLOW}⚠{Colors.RESET} {message}")


def print_info(message: str) -> None:
    print(f"{Colors.BLUE}ℹ{Colors.RESET} {message}")


def check_python_version() -> bool:
    """
    Check that Python is 3.10 or newer.

    Returns:
        bool: True if check passes
    """
    version = sys.version_info
    is_valid = (version.major, version.minor) >= (3, 10)

    if is_valid:
        print_success(f"Python version: {version.major}.{version.minor}.{version.micro}")
    else:
        msg = f"Python version: {version.major}.{version.minor}.{version.micro} (expected >= 3.10)"
        print_error(msg)

    return is_valid


def check_settings() -> bool:
    """
    Check that the TEAFARM_* environment produces valid settings.

    Returns:
        bool: True if Settings loads
    """
    try:
        from pydantic import ValidationError

        from teafarm.core.config import get_settings

        settings = get_settings()
    except ImportError as e:
        print_error(f"teafarm package not importable: {e} (run pip install -e .)")
        return False
    except ValidationError as e:
        print_error(f"Invalid configuration: {e.error_count()} error(s)")
        for err in e.errors():
            print_info(f"  {'.'.join(str(p) for p in err['loc'])}: {err['msg']}")
        return False

    logging.basicConfig(level=settings.log_level.upper())
    print_success(f"Settings loaded (backend {settings.api_base_url})")
    if settings.jwt_secret_key == "change-me-in-production":
        print_warning("TEAFARM_JWT_SECRET_KEY uses the default value")
    return True


def check_backend() -> bool:
    """
    Check that the REST backend answers its health endpoint.

    Returns:
        bool: True if the backend responds with 200
    """
    try:
        import httpx

        from teafarm.core.config import get_settings

        settings = get_settings()
        url = f"{settings.api_base_url}/health"
        response = httpx.get(url, timeout=settings.request_timeout)

        if response.status_code == 200:
            print_success(f"Backend reachable ({url})")
            return True
        else:
            print_error(f"Backend returned status {response.status_code} ({url})")
            return False

    except ImportError:
        print_warning("httpx or teafarm not installed")
        return False
    except httpx.HTTPError as e:
        print_error(f"Backend connection failed: {str(e)}")
        return False


def check_credentials() -> bool:
    """
    Report the persisted session, if any.

    A missing credentials file is not a failure; an unreadable one is.

    Returns:
        bool: True unless the file exists but cannot be parsed
    """
    from teafarm.core.config import get_settings

    path = get_settings().credentials_path
    if not path.exists():
        print_info(f"No stored session ({path})")
        return True

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        print_error(f"Credentials file unreadable: {e}")
        return False

    user = data.get("user") or {}
    if data.get("authToken"):
        print_success(f"Stored session for '{user.get('username', '?')}' ({path})")
    else:
        print_info(f"Credentials file holds no token ({path})")
    return True


def check_export_dir() -> bool:
    """
    Check that the CSV export directory can be created and written.

    Returns:
        bool: True if writable
    """
    from teafarm.core.config import get_settings

    export_dir = get_settings().export_dir
    try:
        export_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print_error(f"Cannot create export directory {export_dir}: {e}")
        return False

    if os.access(export_dir, os.W_OK):
        print_success(f"Export directory writable: {export_dir}/")
        return True
    print_error(f"Export directory not writable: {export_dir}/")
    return False


def check_project_structure() -> bool:
    """
    Check if required project directories exist.

    Returns:
        bool: True if all directories exist
    """
    required_dirs = [
        "teafarm",
        "teafarm/api",
        "teafarm/core",
        "teafarm/models",
        "teafarm/services",
        "teafarm/store",
        "scripts",
    ]

    all_exist = True
    for dir_path in required_dirs:
        if os.path.isdir(dir_path):
            print_success(f"Directory exists: {dir_path}/")
        else:
            print_error(f"Directory missing: {dir_path}/")
            all_exist = False

    return all_exist


def check_config_file() -> bool:
    """
    Check if .env file exists and .env.example is present.

    Returns:
        bool: True if config is properly set up
    """
    env_exists = os.path.exists(".env")
    env_example_exists = os.path.exists(".env.example")

    if env_exists:
        print_success(".env file exists")
    else:
        print_warning(".env file not found (copy from .env.example)")

    if env_example_exists:
        print_success(".env.example exists")
    else:
        print_error(".env.example missing")

    return env_example_exists


def main() -> int:
    """
    Run all health checks.

    Returns:
        int: Exit code (0 = success, 1 = failure)
    """
    print(f"\n{Colors.BOLD}🍃 Tea Farm Operations Health Check{Colors.RESET}\n")

    results = []

    results.append(("Python Version", check_python_version()))
    results.append(("Project Structure", check_project_structure()))
    results.append(("Config Files", check_config_file()))
    settings_ok = check_settings()
    results.append(("Settings", settings_ok))
    if settings_ok:
        results.append(("Credentials", check_credentials()))
        results.append(("Export Directory", check_export_dir()))
        results.append(("Backend", check_backend()))

    # Summary
    print(f"\n{Colors.BOLD}{'='*50}{Colors.RESET}")
    passed = sum(1 for _, result in results if result)
    total = len(results)

    if all(result for _, result in results):
        print(f"{Colors.GREEN}{Colors.BOLD}✓ All checks passed ({passed}/{total}){Colors.RESET}\n")
        return 0

    failed = total - passed
    print(
        f"{Colors.RED}{Colors.BOLD}✗ System has issues "
        f"({passed}/{total} checks passed, {failed} failed){Colors.RESET}\n"
    )
    print(f"{Colors.BOLD}Failed checks:{Colors.RESET}")
    for name, result in results:
        if not result:
            print(f"  {Colors.RED}✗{Colors.RESET} {name}")
    print()
    return 1


if __name__ == "__main__":
    sys.exit(main())
