"""CPE v2 sensor radio frames: AES-128, CTR and CMAC, the frame codec and gateway logic."""

__version__ = "2.0.0"