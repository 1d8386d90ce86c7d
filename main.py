"""
main.py — Bootstrap

1. Load tuning overrides
2. Create the app (loads saved records, opens the audio sink)
3. Push the title menu
4. Run
"""

from core import tuning
from core.app import App
from scenes.menu_scene import MenuScene


def main():
    tuning.load()
    app = App(title="Forest Keeper")
    print(f"[BOOT] records from {app.recorder.directory} — "
          f"{app.recorder.stats.games_played} games played")
    app.push_scene(MenuScene())
    app.run()


if __name__ == "__main__":
    main()
