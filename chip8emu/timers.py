class TimerBank:
    """Delay and sound timers. Both count down to zero and stay there."""

    def __init__(self):
        self.delay_timer = 0
        self.sound_timer = 0

    def tick(self):
        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1

    @property
    def sound_active(self):
        # the buzzer should sound while this is set
        return self.sound_timer > 0
