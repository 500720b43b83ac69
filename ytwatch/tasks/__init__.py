from .video_stats import VideoStats, VideoStatsResult, get_video_stats

__all__ = ["VideoStats", "VideoStatsResult", "get_video_stats"]
