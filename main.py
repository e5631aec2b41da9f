# ============================================================
# TABLE OF CONTENTS
# ------------------------------------------------------------
# 1. DEMO ROSTER
# 2. MAIN ENTRYPOINT
# ============================================================

# ------------------------------------------------------------
# Standard library imports
# ------------------------------------------------------------
import itertools
import logging
import signal
import sys

# ------------------------------------------------------------
# Third-party imports
# ------------------------------------------------------------
from PyQt6 import QtCore, QtGui, QtWidgets
from PyQt6.QtCore import QTimer

# ------------------------------------------------------------
# Project imports
# ------------------------------------------------------------
from core import config
from core.engine import GridEngine, GridSettings
from core.models import Participant, ScreenShare
from core.templates import list_templates
from ui.grid_view import GridController, VideoGridWidget

LOCAL_ID = "me"


# ============================================================
# DEMO ROSTER
# ------------------------------------------------------------
# Synthetic participants stand in for the session's roster.
# ============================================================
class DemoRoster:
    """Mutable roster the keyboard shortcuts edit."""

    def __init__(self, count=6):
        self._ids = itertools.count(1)
        self.participants = [Participant(LOCAL_ID, "You", is_local=True)]
        self.pinned = set()
        self.sharing = set()
        for _ in range(count):
            self.add()

    def add(self):
        n = next(self._ids)
        self.participants.append(
            Participant(f"peer-{n}", f"Guest {n}", video_off=n % 4 == 0, mic_off=n % 3 == 0)
        )

    def remove(self):
        if len(self.participants) > 1:
            gone = self.participants.pop()
            self.pinned.discard(gone.peer_id)
            self.sharing.discard(gone.peer_id)

    def toggle_pin_last(self):
        if len(self.participants) > 1:
            peer_id = self.participants[-1].peer_id
            self.pinned ^= {peer_id}

    def toggle_share(self):
        self.sharing ^= {LOCAL_ID}

    def screen_shares(self):
        return [ScreenShare(owner_id=owner) for owner in sorted(self.sharing)]


# ============================================================
# MAIN ENTRYPOINT
# ------------------------------------------------------------
def main():
    """Build the demo window and start the event loop."""
    config.configure_logging(config.load_config())
    logging.info("Starting video grid demo")

    app = QtWidgets.QApplication(sys.argv)
    signal.signal(signal.SIGINT, lambda sig, frame: app.quit())

    # Allow Python to handle SIGINT properly in Qt event loop
    sigint_timer = QTimer()
    sigint_timer.timeout.connect(lambda: None)
    sigint_timer.start(500)

    app.setStyle(QtWidgets.QStyleFactory.create("Fusion"))
    app.setStyleSheet("QWidget { background: #111827; color: #ffffff; }")

    engine = GridEngine(
        template_id=config.DEFAULT_TEMPLATE,
        viewport_width=config.INITIAL_WIDTH,
        viewport_height=config.INITIAL_HEIGHT,
        settings=GridSettings.from_config(),
    )
    controller = GridController(engine, debounce_ms=config.RESIZE_DEBOUNCE_MS)
    roster = DemoRoster()

    mw = QtWidgets.QMainWindow()
    mw.setWindowTitle("Video Grid")
    grid_widget = VideoGridWidget(controller)
    mw.setCentralWidget(grid_widget)
    mw.resize(config.INITIAL_WIDTH, config.INITIAL_HEIGHT)

    template_ids = [t.id for t in list_templates()]

    def push_roster():
        controller.update_roster(
            roster.participants,
            local_id=LOCAL_ID,
            pinned_ids=roster.pinned,
            screen_shares=roster.screen_shares(),
        )
        grid_widget.render()
        mw.statusBar().showMessage(
            f"template={engine.template_id} breakpoint={engine.breakpoint} "
            f"participants={len(roster.participants)} remaining={engine.remaining_count}"
        )

    def cycle_template():
        idx = template_ids.index(engine.template_id) if engine.template_id in template_ids else -1
        controller.set_template(template_ids[(idx + 1) % len(template_ids)])
        push_roster()

    def edit(action):
        action()
        push_roster()

    QtGui.QShortcut(QtGui.QKeySequence("+"), mw, lambda: edit(roster.add))
    QtGui.QShortcut(QtGui.QKeySequence("="), mw, lambda: edit(roster.add))
    QtGui.QShortcut(QtGui.QKeySequence("-"), mw, lambda: edit(roster.remove))
    QtGui.QShortcut(QtGui.QKeySequence("p"), mw, lambda: edit(roster.toggle_pin_last))
    QtGui.QShortcut(QtGui.QKeySequence("s"), mw, lambda: edit(roster.toggle_share))
    QtGui.QShortcut(QtGui.QKeySequence("t"), mw, cycle_template)
    QtGui.QShortcut(QtGui.QKeySequence("q"), mw, app.quit)

    push_roster()
    mw.show()
    QtCore.QTimer.singleShot(0, lambda: controller.notify_resize(mw.width(), mw.height()))

    logging.info("+/- = add/remove participant, p = pin, s = share screen, t = template, drag = move, q = quit.")
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
