#!/usr/bin/env python3
"""
Startup script for the PreCalc Tutor API.
Handles environment setup and service initialization.
"""

import sys
from pathlib import Path


def check_environment():
    """Check if the environment is properly set up."""
    print("🔍 Checking environment...")

    if not hasattr(sys, 'real_prefix') and not (hasattr(sys, 'base_prefix') and sys.base_prefix != sys.prefix):
        print("⚠️  Warning: Not running in a virtual environment")

    env_file = Path(".env")
    if not env_file.exists():
        print("⚠️  No .env file found. Copying from env.example...")
        example_file = Path("env.example")
        if example_file.exists():
            env_file.write_text(example_file.read_text())
            print("✅ .env file created. Please edit it with your API keys.")
        else:
            print("❌ env.example not found!")
            return False

    return True


def check_dependencies():
    """Check if required dependencies are installed."""
    print("📦 Checking dependencies...")

    try:
        import fastapi  # noqa: F401
        import uvicorn  # noqa: F401
        import anthropic  # noqa: F401
        import httpx  # noqa: F401
        print("✅ All dependencies are installed")
        return True
    except ImportError as e:
        print(f"❌ Missing dependency: {e}")
        print("   Run: pip install -e .")
        return False


def start_service():
    """Start the tutor API."""
    print("🚀 Starting PreCalc Tutor API...")

    sys.path.append(str(Path(__file__).resolve().parent))
    from shared.config import get_settings, debug_settings
    import uvicorn

    settings = get_settings()
    debug_settings()

    providers = []
    if settings.anthropic_api_key:
        providers.append("Anthropic")
    if settings.openai_api_key:
        providers.append("OpenAI")

    if not providers:
        print("⚠️  No LLM providers configured! Add API keys to .env file")
        print("   The service will start but tutor requests will fail")
    else:
        print(f"🤖 LLM Providers: {', '.join(providers)}")
    print(f"🖼️  OCR: {'Mathpix + Claude Vision' if settings.has_mathpix else 'Claude Vision only'}")

    print("\n" + "=" * 50)
    print("🎯 Service starting at:")
    print(f"   http://localhost:{settings.service_port}")
    print(f"   Health check: http://localhost:{settings.service_port}/api/health")
    print(f"   API docs: http://localhost:{settings.service_port}/docs")
    print("=" * 50 + "\n")

    uvicorn.run(
        "tutor_service.main:app",
        host="0.0.0.0",
        port=settings.service_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
    return True


def main():
    """Main startup function."""
    print("🌟 PreCalc Tutor API Startup")
    print("=" * 50)

    if not check_environment():
        print("❌ Environment check failed!")
        return

    if not check_dependencies():
        print("❌ Dependency check failed!")
        return

    start_service()


if __name__ == "__main__":
    main()
