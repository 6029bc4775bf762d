from typing import Tuple
import numpy as np


class ColorService:
    """
    RGB -> HSL on whole arrays at once.
    Hue in degrees [0, 360), saturation and lightness in [0, 1].
    """

    @staticmethod
    def rgb_to_hsl(r: np.ndarray, g: np.ndarray, b: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Args
        ----
        r, g, b : np.ndarray  uint8 channels, any (matching) shape

        Returns
        -------
        (h, s, l) : float64 arrays of the same shape
        """
        r_n = np.asarray(r, dtype=np.float64) / 255
        g_n = np.asarray(g, dtype=np.float64) / 255
        b_n = np.asarray(b, dtype=np.float64) / 255

        c_max = np.maximum(np.maximum(r_n, g_n), b_n)
        c_min = np.minimum(np.minimum(r_n, g_n), b_n)
        d = c_max - c_min
        light = (c_max + c_min) / 2

        chromatic = d != 0
        d_safe = np.where(chromatic, d, 1.0)

        # Achromatic pixels never reach these branches, so both denominators are > 0 there
        high = 2 - c_max - c_min
        low = c_max + c_min
        sat = np.where(
            light > 0.5,
            d / np.where(high == 0, 1.0, high),
            d / np.where(low == 0, 1.0, low),
        )

        # Max channel is picked in R, G, B order: ties go to the earlier channel
        hue = np.select(
            [c_max == r_n, c_max == g_n],
            [
                (g_n - b_n) / d_safe + np.where(g_n < b_n, 6.0, 0.0),
                (b_n - r_n) / d_safe + 2,
            ],
            default=(r_n - g_n) / d_safe + 4,
        ) * 60

        hue = np.where(chromatic, hue, 0.0)
        sat = np.where(chromatic, sat, 0.0)
        return hue, sat, light

    def pixel_to_hsl(self, r: int, g: int, b: int) -> Tuple[float, float, float]:
        """Single-pixel convenience wrapper."""
        h, s, l = self.rgb_to_hsl(np.array(r), np.array(g), np.array(b))
        return float(h), float(s), float(l)
