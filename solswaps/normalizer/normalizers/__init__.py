from solswaps.normalizer.normalizers import geyser, rpc, shared

__all__ = ["geyser", "rpc", "shared"]
