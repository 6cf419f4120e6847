"""
Serverless entry point: exposes the Showcase API to Vercel's Python runtime.
"""
import sys
from pathlib import Path

# the package lives under backend/ and is not installed on the serverless host
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from mangum import Mangum
from showcase_api.main import app

# no startup or shutdown events on serverless invocations
asgi_handler = Mangum(app, lifespan="off")


def handler(event, context=None):
    return asgi_handler(event, context)
