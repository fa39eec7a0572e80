#!/usr/bin/env python3
"""
Launcher - routes to different adapters.

Usage:
    python main.py [adapter]

Adapters:
    cli     - interactive REPL (default)
    demo    - scripted two-question conversation
"""

import os
import sys
from pathlib import Path
from dotenv import load_dotenv

from convo import ConversationError, ConversationSession
from convo.config_loader import ConfigLoader
from convo.logger import init_logger, LogManager


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    load_dotenv()

    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        print("Error: OPENAI_API_KEY environment variable not set")
        print("Please add it to your .env file")
        return 1

    base_dir = Path(__file__).parent
    init_logger(log_file=str(base_dir / "logs" / "convo.log"), shell_output=False)
    log_manager = LogManager()

    config_loader = ConfigLoader(os.getenv("CONVO_CONFIG", base_dir / "config" / "config.yaml"))

    adapter = argv[0] if argv else "cli"
    try:
        if adapter == "cli":
            from adapters.cli_ptk import run_repl
            run_repl(config_loader, api_key, log_manager)
        elif adapter == "demo":
            from adapters.demo import run_demo
            run_demo(ConversationSession.from_config(config_loader.get_config(), api_key))
        else:
            print(f"Error: Unknown adapter '{adapter}'")
            print("Available adapters: cli, demo")
            return 1
    except (ConversationError, FileNotFoundError) as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
