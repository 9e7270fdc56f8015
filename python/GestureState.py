# ==========================================
# MODE STATE (lock + zoom flags)
# ==========================================
class ModeState:
    """
    Persistent mode flags shared by the detectors.

    locked=False -> swipe navigation between bodies
    locked=True  -> rotary dial changes the detail level
    """

    def __init__(self):
        self.locked = False
        self.zoomed_in = False
        # body index the current zoom belongs to, -1 when not zoomed
        self.zoomed_index = -1

    @property
    def mode_name(self):
        return "dial" if self.locked else "swipe"

    def lock(self) -> bool:
        """Enter dial mode. Returns True when the flag actually changed."""
        if self.locked:
            return False
        self.locked = True
        return True

    def unlock(self) -> bool:
        """Enter swipe mode. Returns True when the flag actually changed."""
        if not self.locked:
            return False
        self.locked = False
        return True

    def zoom_in(self, index: int) -> bool:
        if self.zoomed_in:
            return False
        self.zoomed_in = True
        self.zoomed_index = index
        return True

    def zoom_out(self) -> int:
        """Leave zoom. Returns the index that was zoomed, -1 if not zoomed."""
        if not self.zoomed_in:
            return -1
        index = self.zoomed_index
        self.zoomed_in = False
        self.zoomed_index = -1
        return index

    def to_dict(self):
        return {"locked": self.locked, "zoomed_in": self.zoomed_in, "mode": self.mode_name}
