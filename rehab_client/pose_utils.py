# rehab_client/pose_utils.py

import os
os.environ['TF_CPP_MIN_LOG_LEVEL'] = '3'

from typing import List, Optional, Tuple

import cv2
import mediapipe as mp

from rehab_client.landmarks import Landmark, LandmarkFrame, is_visible

mp_pose = mp.solutions.pose

BONE_COLOR = (255, 243, 0)      # BGR cyan
JOINT_COLOR = (255, 255, 255)


def landmarks_from_results(results) -> Optional[List[Landmark]]:
    """Convert a MediaPipe Pose result into our landmark frame (None = no person)."""
    if not results.pose_landmarks:
        return None
    return [
        Landmark(x=p.x, y=p.y, z=p.z, visibility=p.visibility)
        for p in results.pose_landmarks.landmark
    ]


class PoseEstimator:
    def __init__(self):
        self.pose = mp_pose.Pose(
            static_image_mode=False,
            model_complexity=1,
            smooth_landmarks=True,
            enable_segmentation=False,
            min_detection_confidence=0.5,
            min_tracking_confidence=0.5,
        )

    def process(self, frame_bgr) -> Optional[List[Landmark]]:
        """
        Input: BGR frame from OpenCV.
        Output: 33 normalized landmarks for the detected person, or None.
        """
        rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        results = self.pose.process(rgb)
        return landmarks_from_results(results)

    def close(self):
        self.pose.close()


def _to_px(lm: Landmark, w: int, h: int) -> Tuple[int, int]:
    return int(lm.x * w), int(lm.y * h)


def draw_skeleton(image, landmarks: LandmarkFrame) -> None:
    """Draw bones and joints, skipping anything below the visibility threshold."""
    h, w = image.shape[:2]

    for start_idx, end_idx in mp_pose.POSE_CONNECTIONS:
        start, end = landmarks[start_idx], landmarks[end_idx]
        if is_visible(start) and is_visible(end):
            cv2.line(image, _to_px(start, w, h), _to_px(end, w, h), BONE_COLOR, 3)

    for lm in landmarks:
        if is_visible(lm):
            cv2.circle(image, _to_px(lm, w, h), 5, JOINT_COLOR, -1)
