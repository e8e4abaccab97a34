#!/usr/bin/env python
"""
Start the KisanMitra FastAPI service.
"""

import argparse
import logging
import os
import sys

import uvicorn

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from kisanmitra.infra.config import get_config

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main():
    cfg = get_config()
    parser = argparse.ArgumentParser(
        description="Start the KisanMitra FastAPI service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python run_web.py                    # default host and port
    python run_web.py --port 8080        # listen on 8080
    python run_web.py --reload           # auto reload while developing
        """
    )

    parser.add_argument(
        '--host',
        type=str,
        default='0.0.0.0',
        help='bind address (default: 0.0.0.0)'
    )

    parser.add_argument(
        '--port',
        type=int,
        default=cfg.fastapi_port,
        help=f'port (default: FASTAPI_PORT or {cfg.fastapi_port})'
    )

    parser.add_argument(
        '--reload',
        action='store_true',
        help='reload on code changes (development only)'
    )

    args = parser.parse_args()

    shown_host = args.host if args.host != '0.0.0.0' else 'localhost'
    logger.info(f"Starting KisanMitra on http://{shown_host}:{args.port}")
    logger.info(f"LLM: {cfg.llm_provider} / {cfg.llm_model}")
    logger.info(f"API docs: http://{shown_host}:{args.port}/docs")

    uvicorn.run(
        "kisanmitra.api.server:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info"
    )


if __name__ == '__main__':
    main()
