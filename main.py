# ================================
# file: main.py
# ================================
from __future__ import annotations
"""Project entrypoint: runs the automated 5-axis scan with a real-time loop and GUI.
- Default: approach -> orbit -> return demo trajectory with the matplotlib view.
- --manual: hold a fixed operator pose and scan from there.
- --advice: ask the advisory service a question and exit.

Usage:
    python main.py
    python main.py --no-gui --seed 1 --density 2000
    python main.py --manual 20 50 50 30 0 --duration 2
    python main.py --advice "How do I calibrate the camera to the A axis?"
"""
import argparse
import os
import time
from datetime import datetime
from typing import Optional, Sequence

from core.config import TICK_HZ, GUI_UPDATE_RATE_HZ, POINTS_PER_AREA, SENSOR_STRIDE
from sim import MachineSim, SurfacePointSampler, ForwardKinematicsSolver, TrajectoryGenerator
from scan import VisibilityEngine
from appio import DataLogger, AdvisoryClient, log_to_file


def run(use_gui: bool = True, seed: Optional[int] = None, density: float = POINTS_PER_AREA,
        stride: int = SENSOR_STRIDE, rate_hz: float = TICK_HZ, manual: Optional[Sequence[float]] = None,
        duration: Optional[float] = None, record_path: Optional[str] = None,
        log_dir: Optional[str] = None) -> MachineSim:
    """Wire modules and start the real-time loop.
    Parameters
    ----------
    use_gui     : Show the matplotlib 3D view.
    seed        : Seed for the point sampler (None = non-reproducible).
    density     : Samples per unit surface area.
    stride      : Visibility subsampling stride.
    rate_hz     : Loop frequency.
    manual      : (x, y, z, a, b) operator pose; scanning without trajectory.
    duration    : Manual mode run time in seconds (trajectory mode ends by itself).
    record_path : Optional NPZ path for the session recording.
    """
    log_filename = f"scan_run_log_{datetime.now().strftime('%Y%m%d_%H%M%S')}.txt"
    log_filepath = os.path.join(log_dir or os.getcwd(), log_filename)
    log_file = open(log_filepath, 'w', encoding='utf-8')

    gui = None
    recorder = DataLogger()
    sim = None
    try:
        log_to_file(log_file, "=" * 60)
        log_to_file(log_file, "5-axis scan simulation")
        log_to_file(log_file, f"Start: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        log_to_file(log_file, f"Mode: {'manual pose' if manual else 'demo trajectory'}")
        log_to_file(log_file, "=" * 60)

        sampler = SurfacePointSampler(density=density, logger_func=log_to_file, log_file=log_file)
        cloud = sampler.generate(seed=seed)

        fk = ForwardKinematicsSolver()
        sim = MachineSim(cloud, fk=fk, trajectory=TrajectoryGenerator(),
                         visibility=VisibilityEngine(stride=stride),
                         logger_func=log_to_file, log_file=log_file)

        if use_gui:
            from gui import ScanVisualizer
            gui = ScanVisualizer(cloud)

        now = time.time()
        if manual:
            x, y, z, a, b = manual
            sim.set_axes(x=x, y=y, z=z, a=a, b=b)
            sim.start_scanning()
            end_t = now + (duration if duration is not None else 5.0)
        else:
            sim.start_trajectory(now)
            end_t = None

        dt = 1.0 / rate_hz
        gui_dt = 1.0 / GUI_UPDATE_RATE_HZ
        last_gui = 0.0
        log_to_file(log_file, f"Main loop @ {rate_hz:.1f} Hz, {len(cloud)} target points")

        while True:
            t_loop = time.time()
            res = sim.tick(t_loop)
            recorder.log_axes(res.axes)
            recorder.log_pose(res.pose)
            recorder.log_scan(res.scanned)
            recorder.log_phase(res.phase.name)

            if gui is not None and (res.changed or t_loop - last_gui >= gui_dt):
                st = sim.status()
                gui.update(res.pose, sim.scan_state.positions(cloud), res.axes,
                           chain_points=fk.chain_points(res.axes),
                           status=f"{st['mode']} | Z-Head: {st['z_head']} | "
                                  f"{st['scanned']} pts ({100.0 * st['coverage']:.1f}%)")
                last_gui = t_loop

            if res.done or (end_t is not None and t_loop >= end_t):
                break

            sleep = dt - (time.time() - t_loop)
            if sleep > 0:
                time.sleep(sleep)

        st = sim.status()
        log_to_file(log_file, f"Finished: {st['scanned']}/{st['total']} points "
                              f"({100.0 * st['coverage']:.1f}%)")
        return sim

    except KeyboardInterrupt:
        log_to_file(log_file, "User interrupted (Ctrl+C), stopping.")
        if sim is not None:
            sim.abort_trajectory()
        return sim
    finally:
        if record_path:
            try:
                recorder.save(record_path, sim.scan_state.indices() if sim is not None else None)
                print(f"[INFO] Session recording saved: {record_path}")
            except OSError as e:
                print(f"[ERROR] Failed to save recording: {e}")
        if gui is not None:
            gui.close()
        log_file.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="5-axis scan head simulator")
    parser.add_argument("--no-gui", action="store_true", help="Run headless")
    parser.add_argument("--seed", type=int, default=None, help="Point sampler seed")
    parser.add_argument("--density", type=float, default=POINTS_PER_AREA,
                        help=f"Samples per unit area (default: {POINTS_PER_AREA:.0f})")
    parser.add_argument("--stride", type=int, default=SENSOR_STRIDE, help="Visibility stride (default: 1)")
    parser.add_argument("--rate", type=float, default=TICK_HZ, help=f"Loop rate Hz (default: {TICK_HZ:.0f})")
    parser.add_argument("--manual", nargs=5, type=float, default=None, metavar=("X", "Y", "Z", "A", "B"),
                        help="Hold a manual pose instead of running the trajectory")
    parser.add_argument("--duration", type=float, default=None, help="Manual mode run time (s)")
    parser.add_argument("--record", default=None, help="Save session recording (.npz)")
    parser.add_argument("--advice", default=None, help="Ask the advisory service and exit")
    return parser


def main() -> None:
    args = build_parser().parse_args()

    if args.advice is not None:
        print(AdvisoryClient().ask(args.advice))
        return

    print("[INFO] Starting scan simulation:")
    print(f"  - GUI: {'off' if args.no_gui else 'on'}")
    print(f"  - Seed: {args.seed}")
    print(f"  - Density: {args.density:.0f} pts/unit^2")
    print(f"  - Stride: {args.stride}")

    run(use_gui=not args.no_gui, seed=args.seed, density=args.density, stride=args.stride,
        rate_hz=args.rate, manual=args.manual, duration=args.duration, record_path=args.record)


if __name__ == "__main__":
    main()
