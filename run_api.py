#!/usr/bin/env python3
"""
Depot Sales API - Launcher
Sets up the src/ path, validates configuration and serves the FastAPI app
with uvicorn.
"""
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT / 'src'))


def main():
    """Main entry point"""
    import uvicorn

    import config
    from config import validate_config
    from utils.logger import get_logger
    from api.main import create_app

    print("\n" + "=" * 80)
    print("DEPOT SALES API")
    print("=" * 80)
    print(f"Project Root: {PROJECT_ROOT}")
    print("=" * 80 + "\n")

    logger = get_logger(log_level=config.LOG_LEVEL)
    try:
        validate_config()
    except ValueError as e:
        print(f"\n[FAIL] {e}")
        logger.critical(f"API startup failed: {e}", component="Main")
        sys.exit(1)
    print("[OK] Configuration validated")

    logger.info(
        f"REST API running on http://{config.API_HOST}:{config.API_PORT} (Swagger: /docs)",
        component="Main",
    )
    uvicorn.run(create_app(), host=config.API_HOST, port=config.API_PORT, log_level="info")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\n⏹️  API stopped by user")
        sys.exit(0)
