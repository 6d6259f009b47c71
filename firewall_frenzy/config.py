"""Runtime settings for the Firewall Frenzy front-ends.

Gameplay tuning lives in :mod:`firewall_frenzy.game.constants`; the values
here only control how the game is served and displayed.
"""

from .game.constants import TICKS_PER_SECOND

GAME_NAME = "Firewall Frenzy"

TICK_RATE = TICKS_PER_SECOND  # simulation ticks per second
STATE_BROADCAST_RATE = 30  # snapshots pushed to browsers per second

HOST = "127.0.0.1"
PORT = 8000

# Desktop client.
WINDOW_CAPTION = GAME_NAME
HUD_HEIGHT = 40
MESSAGE_SECONDS = 2.0  # how long a transient message stays on screen
