# ui/main_app.py
import sys

import gi

gi.require_version("Gtk", "4.0")
gi.require_version("Gdk", "4.0")
from gi.repository import Gtk, Gdk

from ui.board_view import BoardView
from vgo.runtime import Runtime

DEBUG = False

HELP = "click: play  ctrl+click: label  ←/→: back/forward  Home/End  Ctrl+Z: recall  Del: delete"


class MainWindow(Gtk.ApplicationWindow):
    def __init__(self, app, runtime: Runtime):
        super().__init__(application=app, title="vgo")
        self.set_default_size(900, 960)
        self.runtime = runtime

        self.board_view = BoardView(runtime.properties.x, runtime.properties.y)
        self.board_view.on_click(self._on_click)
        self.board_view.on_ctrl_click(self._on_ctrl_click)

        self.status = Gtk.Label(label=HELP)
        self.status.set_xalign(0.0)
        self.comment = Gtk.Entry()
        self.comment.set_placeholder_text("Comment for the current move")
        self.comment.connect("activate", self._on_comment)

        vbox = Gtk.Box(orientation=Gtk.Orientation.VERTICAL)
        vbox.append(self.board_view)
        vbox.append(self.comment)
        vbox.append(self.status)
        self.set_child(vbox)

        keys = Gtk.EventControllerKey.new()
        keys.connect("key-pressed", self._on_key)
        self.add_controller(keys)

        runtime.on_sgf_changed(lambda route, step: self._refresh())
        runtime.on_player_changed(lambda route: self._refresh())
        runtime.set_front(self.board_view)
        self._refresh()

    def _refresh(self):
        route = self.runtime.route
        self.comment.set_text(self.runtime.get_comment())
        self.status.set_text(f"move {self.runtime.cursor.ply}  route {list(route)}  "
                             f"to play: {self.runtime.current_player()}    {HELP}")
        if DEBUG:
            print("[MainWindow] refresh", route)

    def _on_click(self, x: int, y: int):
        self.runtime.put_stone((x, y), self.runtime.current_player())

    def _on_ctrl_click(self, x: int, y: int):
        self.runtime.put_mark((x, y), 'LB')

    def _on_comment(self, entry):
        self.runtime.add_comment(entry.get_text())

    def _on_key(self, controller, keyval, keycode, state):
        ctrl = bool(state & Gdk.ModifierType.CONTROL_MASK)
        if keyval == Gdk.KEY_Left:
            self.runtime.backward()
        elif keyval == Gdk.KEY_Right:
            self.runtime.forward()
        elif keyval == Gdk.KEY_Home:
            self.runtime.first()
        elif keyval == Gdk.KEY_End:
            self.runtime.last()
        elif keyval == Gdk.KEY_Delete:
            self.runtime.del_stone(self.runtime.route)
        elif ctrl and keyval in (Gdk.KEY_z, Gdk.KEY_Z):
            self.runtime.recall()
        elif ctrl and keyval in (Gdk.KEY_s, Gdk.KEY_S):
            print(self.runtime.to_sgf())
        else:
            return False
        return True


class App(Gtk.Application):
    def __init__(self, data=None):
        super().__init__(application_id="org.vgo.app")
        self.data = data

    def do_activate(self):
        win = MainWindow(self, Runtime(data=self.data))
        win.present()


def main():
    data = None
    if len(sys.argv) > 1:
        with open(sys.argv[1], "r", encoding="utf-8") as f:
            data = f.read()
    app = App(data)
    return app.run(None)


if __name__ == "__main__":
    raise SystemExit(main())
