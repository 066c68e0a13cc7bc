#!/usr/bin/env python3
"""
slide2048 - sliding-tile puzzle server

Runs the 2048 game engine behind a Flask/SocketIO service. A browser (or any
client) sends moves and receives the resulting board, score and per-tile
movement trace; the game in progress, best score and statistics are saved
to JSON files so a game can be resumed later.

Usage:
    python main.py                        # Serve on port 5000 and open a browser
    python main.py --port 8080            # Use a custom port
    python main.py --size 5 --seed 42     # 5x5 board with reproducible tiles
    python main.py --state-dir ~/.2048    # Keep save files elsewhere
"""

import argparse

from slide2048.utils import config
from slide2048.ui.web import create_session, run_server

def main():
    parser = argparse.ArgumentParser(description="slide2048 - sliding-tile puzzle server")
    parser.add_argument('--port', type=int, default=5000,
                      help="Port to run the web server on")
    parser.add_argument('--debug', action='store_true',
                      help="Run in debug mode")
    parser.add_argument('--no-browser', action='store_true',
                      help="Don't open browser automatically")
    parser.add_argument('--size', type=int, default=None,
                      help="Board size (N for an NxN board)")
    parser.add_argument('--state-dir', default=None,
                      help="Directory for saved games and statistics")
    parser.add_argument('--seed', type=int, default=None,
                      help="Random seed for tile spawns")
    args = parser.parse_args()

    if args.size is not None and args.size < 2:
        parser.error("--size must be at least 2")

    # Initialize configuration
    applied = config.apply_settings({
        'grid_size': args.size,
        'state_dir': args.state_dir,
        'random_seed': args.seed,
    })
    if applied:
        print(f"Applied settings: {', '.join(applied)}")

    create_session()
    run_server(args.port, args.debug, not args.no_browser)

if __name__ == "__main__":
    main()
