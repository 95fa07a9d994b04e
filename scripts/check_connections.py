#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify the database and AI provider connections.
Usage: python scripts/check_connections.py
"""
from mindmatch.core.config import get_settings
from mindmatch.db.postgres import get_engine, test_postgres_connection
from mindmatch.schemas.schemas import SentimentResult
from mindmatch.services.openai_client import TextGenerationClient
from mindmatch.services.sentiment_client import MoodAnalysisService


def main():
    settings = get_settings()
    print("=" * 50)
    print("MINDMATCH - CONNECTION CHECK")
    print("=" * 50)

    # Database
    print("\n[1] Checking database...")
    if settings.use_mock_backend:
        print("    ⚠️  DATABASE_URL not configured: running in mock mode")
    elif test_postgres_connection(get_engine()):
        print("    ✅ Database: CONNECTED")
    else:
        print("    ❌ Database: FAILED")

    # OpenAI
    print("\n[2] Checking OpenAI API...")
    client = TextGenerationClient(settings)
    if client.is_configured:
        print(f"    Base URL: {settings.openai_base_url}")
        if client.test_connection():
            print("    ✅ OpenAI: CONNECTED")
        else:
            print("    ❌ OpenAI: FAILED")
    else:
        print("    ⚠️  OpenAI: API key not configured (fallbacks in use)")

    # HuggingFace
    print("\n[3] Checking HuggingFace sentiment API...")
    if settings.huggingface_api_key:
        result: SentimentResult = MoodAnalysisService(settings).analyze_mood("I feel great today")
        print(f"    Result: {result.sentiment} ({result.confidence})")
    else:
        print("    ⚠️  HuggingFace: API key not configured (neutral fallback in use)")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
