from posemetrics.backends.base import PoseBackend
from posemetrics.backends.synthetic import SyntheticPoseBackend

__all__ = ["PoseBackend", "SyntheticPoseBackend"]
