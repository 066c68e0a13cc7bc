#!/usr/bin/env python3
"""
Configuration management for slide2048.
Centralizes game and service parameters and provides a function for applying overrides.
"""

# ---------------- CONFIGURATION PARAMETERS ----------------
# Board parameters
GRID_SIZE = 4                  # Board is GRID_SIZE x GRID_SIZE
WIN_TILE = 2048                # Tile value that wins the game
FOUR_PROBABILITY = 0.1         # Chance that a spawned tile is a 4 instead of a 2
HISTORY_LIMIT = 20             # Undo snapshots kept per game
RANDOM_SEED = None             # Fixed seed for reproducible games (None = system entropy)

# Persistence parameters
STATE_DIR = "saves"            # Directory holding the JSON store files
STORAGE_PREFIX = "game2048_"   # File name prefix for every stored key

# Service parameters
PLAY_TIMER_INTERVAL = 1.0      # Seconds between play-time ticks

def apply_settings(settings):
    """
    Apply settings to global configuration.
    Takes a dictionary of parameter names and values.
    Returns a list of applied parameters.
    """
    if not settings:
        return []

    global GRID_SIZE, WIN_TILE, FOUR_PROBABILITY, HISTORY_LIMIT, RANDOM_SEED
    global STATE_DIR, STORAGE_PREFIX, PLAY_TIMER_INTERVAL

    applied = []

    # Board parameters
    if settings.get('grid_size') is not None:
        GRID_SIZE = settings['grid_size']
        applied.append('grid_size')
    if settings.get('win_tile') is not None:
        WIN_TILE = settings['win_tile']
        applied.append('win_tile')
    if settings.get('four_probability') is not None:
        FOUR_PROBABILITY = settings['four_probability']
        applied.append('four_probability')
    if settings.get('history_limit') is not None:
        HISTORY_LIMIT = settings['history_limit']
        applied.append('history_limit')
    if settings.get('random_seed') is not None:
        RANDOM_SEED = settings['random_seed']
        applied.append('random_seed')

    # Persistence parameters
    if settings.get('state_dir') is not None:
        STATE_DIR = settings['state_dir']
        applied.append('state_dir')
    if settings.get('storage_prefix') is not None:
        STORAGE_PREFIX = settings['storage_prefix']
        applied.append('storage_prefix')

    # Service parameters
    if settings.get('play_timer_interval') is not None:
        PLAY_TIMER_INTERVAL = settings['play_timer_interval']
        applied.append('play_timer_interval')

    return applied
