"""Protocol constants and defaults"""

SUITS = ('hearts', 'diamonds', 'clubs', 'spades')

PHASE_WAITING = 'waiting'
PHASE_PLAYING = 'playing'
PHASE_FINISHED = 'finished'

DEFAULT_SCHEME = 'ws'
DEFAULT_HOST = 'localhost'
DEFAULT_PORT = 8080
DEFAULT_PATH = '/ws'
DEFAULT_OPEN_TIMEOUT = 10.0
