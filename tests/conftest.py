import os
import sys
from pathlib import Path

# Ensure repository root is on sys.path for module imports (app, seasonfx)
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Headless environment for pygame surfaces and display calls
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
