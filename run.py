#!/usr/bin/env python3
"""
Ledger Service Entry Point

Starts the FastAPI server for the chequing & savings ledger.
"""

import sys

from bank_ledger.api.server import run_server
from bank_ledger.config import get_config


if __name__ == "__main__":
    config = get_config()
    print("🏦 Starting Chequing & Savings Ledger...")
    print(f"💾 Storage backend: {config.storage_backend}")
    print("💰 All financial calculations use Decimal precision")
    print(f"🌐 API available at: http://localhost:{config.api_port}")
    print(f"📚 Documentation at: http://localhost:{config.api_port}/docs")
    print()

    try:
        run_server()
    except KeyboardInterrupt:
        print("\n👋 Shutting down ledger...")
    except Exception as e:
        print(f"❌ Error starting server: {e}")
        sys.exit(1)
