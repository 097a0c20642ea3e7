"""Verify that the setup is correct before running the collector."""
import asyncio
import os
import sys
from dotenv import load_dotenv
from gitstats.domain.exceptions import ConfigurationError, RemoteLookupError
from gitstats.domain.models import CollectorConfig
from gitstats.infrastructure.github_client import GitHubClient

# Load environment variables from .env or env file
load_dotenv('.env') or load_dotenv('env')


def check_environment_variables():
    """Check required environment variables."""
    print("Checking environment variables...")

    optional_vars = ["GITSTATS_USER", "GITSTATS_REPO", "GITSTATS_METRICS", "GITSTATS_OUTPUT"]

    try:
        CollectorConfig.from_env().validate()
    except ConfigurationError as e:
        print(f"❌ {e}: set GITHUB_TOKEN")
        return False

    print("✅ Required environment variables set")

    for var in optional_vars:
        if os.getenv(var):
            print(f"   {var}: {os.getenv(var)}")

    return True


async def _lookup_authenticated_user(token: str) -> str:
    client = GitHubClient(token)
    try:
        account = await client.get_authenticated_identity()
        return account.get("login", "")
    finally:
        await client.close()


def check_github_access():
    """Verify the token authenticates against the GitHub API."""
    print("\nChecking GitHub API access...")

    token = os.getenv("GITHUB_TOKEN")
    if not token:
        print("❌ GITHUB_TOKEN not set")
        return False

    try:
        login = asyncio.run(_lookup_authenticated_user(token))
    except RemoteLookupError as e:
        print(f"❌ Failed to authenticate with token {token[:4]}...: {e}")
        return False

    print(f"✅ Authenticated as {login}")
    return True


def main():
    """Run all verification checks."""
    print("=" * 60)
    print("gitstats - Setup Verification")
    print("=" * 60)

    checks = [
        ("Environment Variables", check_environment_variables),
        ("GitHub API Access", check_github_access),
    ]

    results = {}
    for name, check_func in checks:
        try:
            results[name] = check_func()
        except Exception as e:
            print(f"❌ {name} check failed with exception: {e}")
            results[name] = False

    print("\n" + "=" * 60)
    print("Verification Summary")
    print("=" * 60)

    for name, passed in results.items():
        status = "✅ PASS" if passed else "❌ FAIL"
        print(f"{status}: {name}")

    if all(results.values()):
        print("\n✅ All checks passed! Ready to run the collector.")
        print("\nNext steps:")
        print('  python collect_stats.py "user/*/followers" "repo/*/*/stars"')
        sys.exit(0)
    else:
        print("\n❌ Some checks failed. Please fix the issues above.")
        print("\nCommon solutions:")
        print("  - Set GITHUB_TOKEN: export GITHUB_TOKEN=your_token")
        print("  - Check the token has not expired or been revoked")
        sys.exit(1)


if __name__ == "__main__":
    main()
