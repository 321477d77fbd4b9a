from rehab_client.landmarks import NUM_LANDMARKS, Landmark, PoseLandmark


def make_frame(points=None, count=NUM_LANDMARKS, visibility=1.0):
    """`count` landmarks at the frame centre, with `points` = {PoseLandmark: (x, y[, visibility])} overridden."""
    frame = [Landmark(0.5, 0.5, 0.0, visibility) for _ in range(count)]
    for idx, point in (points or {}).items():
        if idx < count:
            x, y = point[0], point[1]
            vis = point[2] if len(point) > 2 else 1.0
            frame[idx] = Landmark(x, y, 0.0, vis)
    return frame


HANDS_UP = make_frame({
    PoseLandmark.NOSE: (0.5, 0.30),
    PoseLandmark.LEFT_SHOULDER: (0.6, 0.40),
    PoseLandmark.RIGHT_SHOULDER: (0.4, 0.40),
    PoseLandmark.LEFT_WRIST: (0.6, 0.10),
    PoseLandmark.RIGHT_WRIST: (0.4, 0.10),
})

HANDS_DOWN = make_frame({
    PoseLandmark.NOSE: (0.5, 0.30),
    PoseLandmark.LEFT_SHOULDER: (0.6, 0.40),
    PoseLandmark.RIGHT_SHOULDER: (0.4, 0.40),
    PoseLandmark.LEFT_WRIST: (0.6, 0.70),
    PoseLandmark.RIGHT_WRIST: (0.4, 0.70),
})


class FakeCollaborator:
    def __init__(self, tip="Lovely and slow.", summary="Great session.", fail=False):
        self.tip = tip
        self.summary = summary
        self.fail = fail
        self.calls = []

    def request_coaching_tip(self, exercise, stats):
        self.calls.append(("tip", exercise, stats))
        if self.fail:
            raise RuntimeError("backend down")
        return self.tip

    def request_session_summary(self, exercise, stats):
        self.calls.append(("summary", exercise, stats))
        if self.fail:
            raise RuntimeError("backend down")
        return self.summary
