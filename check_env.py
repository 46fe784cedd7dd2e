#!/usr/bin/env python3
"""Helper script to check and create the .env file for the locker API configuration."""

from pathlib import Path
import os
import sys

TEMPLATE = """# Upstream locker API (required for live data and shipping actions)
LOCKERS_API_KEY=your-api-key-here
LOCKERS_USE_SANDBOX=true
# LOCKERS_BASE_URL overrides both production and sandbox URLs
# LOCKERS_BASE_URL=https://sandbox-api.pudo.co.za
# Comma-separated or JSON array
LOCKERS_LISTING_PATHS=/lockers-data

# First-party relay used when direct calls are blocked (Proxy tier)
# LOCKERS_RELAY_URL=https://your-host/api/relay/lockers
# LOCKERS_RELAY_AUTH_TOKEN=

# Cache lifetime in seconds
LOCKERS_CACHE_TTL_SECONDS=1800

# API Configuration
LOCKERS_API_PREFIX=/api
"""


def _mask(value: str) -> str:
    if len(value) > 12:
        return value[:8] + "..." + value[-4:]
    return value[:2] + "..."


def main():
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("Locker API Environment Variables Checker")
    print("=" * 60)
    print()

    if env_file.exists():
        print(f"✅ Found .env file at: {env_file}")
        print()
        print("Current contents:")
        print("-" * 60)
        for line in env_file.read_text(encoding="utf-8").split("\n"):
            if ("LOCKERS_API_KEY" in line or "LOCKERS_RELAY_AUTH_TOKEN" in line) and "=" in line:
                name, value = line.split("=", 1)
                print(f"{name}={_mask(value.strip())}" if value.strip() else line)
            else:
                print(line)
        print("-" * 60)
        print()
    else:
        print(f"❌ .env file NOT found at: {env_file}")
        print()
        env_file.write_text(TEMPLATE, encoding="utf-8")
        print(f"✅ Created template .env file at: {env_file}")
        print()
        print("⚠️  Please edit .env and add your locker API key!")
        print()
        return

    print("Testing config loading...")
    print()

    try:
        sys.path.insert(0, str(project_root / "src"))
        from locker_directory.config import Settings

        config = Settings()
        if config.api_key:
            print(f"✅ Config loaded LOCKERS_API_KEY: {_mask(config.api_key)}")
        else:
            print("❌ Config LOCKERS_API_KEY is None")
        print(f"   Sandbox mode: {config.use_sandbox}")
        print(f"   Base URL: {config.resolve_base_url()}")
        print(f"   Listing endpoints: {', '.join(config.listing_urls())}")
        if config.relay_url:
            print(f"✅ Relay URL: {config.relay_url}")
        else:
            print("⚠️  LOCKERS_RELAY_URL not set - the proxy tier will be skipped")
        print()

        if os.getenv("LOCKERS_API_KEY") is None and config.api_key:
            print("ℹ️  API key was read from .env (not from the process environment)")
            print()
    except Exception as e:
        print(f"❌ Error loading config: {e}")
        print()
        print("Make sure you're running this from the project root directory")


if __name__ == "__main__":
    main()
