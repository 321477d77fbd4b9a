# rehab_client/rep_demo.py

import logging
import time
from threading import Thread

import cv2
import pyttsx3

from rehab_client import config
from rehab_client.coach_client import CoachClient
from rehab_client.coaching import SUMMARY, CoachingMessage, CoachingScheduler
from rehab_client.exercises import EXERCISES, ExerciseType, get_exercise_config
from rehab_client.pose_utils import PoseEstimator, draw_skeleton
from rehab_client.session import RehabSession

logger = logging.getLogger(__name__)

WINDOW_NAME = "Rehab Coach"

# ---------- Exercise options ----------
EXERCISE_OPTIONS = {str(i): ex for i, ex in enumerate(EXERCISES, start=1)}

# Latest text from the coaching worker (written by the worker, read by the frame loop)
last_coaching_message: str = "System Ready. Move gently."
summary_message: str = ""


def choose_exercise() -> ExerciseType:
    print("Select therapy exercise:")
    for key, exercise in EXERCISE_OPTIONS.items():
        print(f"  {key}. {get_exercise_config(exercise).menu_line()}")
    choice = input(f"Enter 1-{len(EXERCISE_OPTIONS)}: ").strip()
    exercise = EXERCISE_OPTIONS.get(choice, ExerciseType.HAND_RAISE)
    cfg = get_exercise_config(exercise)
    print(f"\nYou selected: {cfg.name}")
    print(f"How to: {cfg.instruction}\n")
    return exercise


# ---------- TTS helper (per-message thread) ----------

def speak_message(text: str):
    """
    Create a fresh pyttsx3 engine for THIS message only.
    Runs in its own thread so the camera loop never blocks.
    """
    if not text:
        return
    try:
        engine = pyttsx3.init()
        engine.setProperty("rate", config.TTS_RATE)
        engine.say(text)
        engine.runAndWait()
        engine.stop()
    except Exception as e:
        logger.warning("TTS error: %s", e)


def on_coaching_message(message: CoachingMessage):
    global last_coaching_message, summary_message

    if message.kind == SUMMARY:
        summary_message = message.text
        return
    last_coaching_message = message.text
    Thread(target=speak_message, args=(message.text,), daemon=True).start()


def draw_hud(frame, exercise: ExerciseType, result):
    cfg = get_exercise_config(exercise)
    stats = result.stats

    cv2.putText(frame, f"Therapy: {cfg.name}", (20, 30),
                cv2.FONT_HERSHEY_SIMPLEX, 0.7, (200, 255, 200), 2)
    cv2.putText(frame, f"Reps: {stats.reps}", (20, 60),
                cv2.FONT_HERSHEY_SIMPLEX, 0.9, (0, 255, 0), 2)
    stability_color = (0, 255, 0) if stats.accuracy > 80 else (0, 255, 255)
    cv2.putText(frame, f"Stability: {round(stats.accuracy)}%", (20, 90),
                cv2.FONT_HERSHEY_SIMPLEX, 0.7, stability_color, 2)

    if result.classification is not None:
        cv2.putText(frame, result.classification.instruction, (20, frame.shape[0] - 70),
                    cv2.FONT_HERSHEY_SIMPLEX, 1.0, (255, 255, 255), 2)

    if last_coaching_message:
        cv2.putText(frame, last_coaching_message, (20, frame.shape[0] - 30),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 200, 255), 2)


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # 1) Choose exercise
    exercise = choose_exercise()

    # 2) Start camera
    cap = cv2.VideoCapture(config.CAMERA_INDEX)
    if not cap.isOpened():
        logger.error("Could not open camera %s.", config.CAMERA_INDEX)
        return

    # 3) Pose estimator, coaching worker, session
    pose_estimator = PoseEstimator()
    scheduler = CoachingScheduler(CoachClient(), on_coaching_message)
    scheduler.start()
    session = RehabSession(scheduler)

    # 4) Countdown before tracking
    countdown_start = time.time()
    countdown_done = False
    print(f"Get into position... starting in {config.COUNTDOWN_SECONDS} seconds.")

    try:
        while True:
            ret, frame = cap.read()
            if not ret:
                break

            display_frame = cv2.flip(frame, 1)   # mirror for the patient

            # ---------- PHASE 1: Countdown ----------
            if not countdown_done:
                remaining = config.COUNTDOWN_SECONDS - int(time.time() - countdown_start)
                if remaining > 0:
                    cv2.putText(display_frame, f"Get ready: {remaining}", (60, 100),
                                cv2.FONT_HERSHEY_SIMPLEX, 1.2, (0, 255, 255), 3)
                else:
                    countdown_done = True
                    session.start_session(exercise)
                    print("Go! Move gently. Press 'q' to end the session.")

                cv2.imshow(WINDOW_NAME, display_frame)
                if cv2.waitKey(1) & 0xFF == ord('q'):
                    break
                continue

            # ---------- PHASE 2: Pose + rep tracking ----------
            landmarks = pose_estimator.process(display_frame)
            if landmarks:
                draw_skeleton(display_frame, landmarks)

            result = session.process_frame(landmarks)
            if result.rep_counted:
                logger.info("=== REP %d (stability %.1f%%) ===", result.stats.reps, result.stats.accuracy)

            draw_hud(display_frame, exercise, result)

            cv2.imshow(WINDOW_NAME, display_frame)
            if cv2.waitKey(1) & 0xFF == ord('q'):
                break
    finally:
        cap.release()
        cv2.destroyAllWindows()
        pose_estimator.close()

    if session.active:
        stats = session.end_session()
        print("Analyzing movement patterns...")
        scheduler.join()
        print(f"\nReps: {stats.reps}  Stability: {round(stats.accuracy)}%  "
              f"Duration: {int(stats.duration)}s")
        print(summary_message)
        speak_message(summary_message)
    scheduler.stop()


if __name__ == "__main__":
    main()
