import pytest

from main import build_parser


def test_manual_pose_flag():
    args = build_parser().parse_args(["--manual", "20", "50", "50", "30", "0", "--no-gui"])
    assert args.manual == [20.0, 50.0, 50.0, 30.0, 0.0]
    assert args.no_gui


def test_defaults_run_demo_trajectory():
    args = build_parser().parse_args([])
    assert args.manual is None
    assert args.advice is None
    assert args.stride == 1


def test_manual_needs_five_values():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--manual", "1", "2", "3"])
