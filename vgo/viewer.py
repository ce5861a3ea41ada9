# viewer.py


class Viewer:
    """
    Push-only rendering target. The runtime calls these and never reads
    anything back; the defaults do nothing so a runtime works headless.
    """

    def place_stone(self, x: int, y: int, color: str):
        pass

    def remove_stone(self, x: int, y: int):
        pass

    def draw_mark(self, mark):
        pass

    def clear_mark(self, x: int, y: int):
        pass

    def set_active_color(self, color: str):
        pass

    def clear_branch_marks(self):
        pass

    def show_branch_marks(self, points):
        pass
