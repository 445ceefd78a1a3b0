"""Hero image URLs for generated articles.

Images are rendered on demand by an external text-to-image endpoint, so the
graphic desk only has to compose the URL. A random seed keeps articles with
similar titles from sharing a cached image.
"""

import random
from typing import List, Optional
from urllib.parse import quote

IMAGE_ENDPOINT = "https://image.pollinations.ai/prompt/"
IMAGE_STYLE = "cinematic lighting, highly detailed, 8k, tech news style, futuristic"
IMAGE_WIDTH = 1280
IMAGE_HEIGHT = 720

# Characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


def build_image_prompt(title: str, tags: List[str]) -> str:
    parts = [title, *tags, IMAGE_STYLE]
    return ", ".join(part for part in parts if part)


def build_image_url(title: str, tags: List[str], rng: Optional[random.Random] = None) -> str:
    rng = rng or random
    prompt = quote(build_image_prompt(title, tags), safe=_URI_COMPONENT_SAFE)
    seed = rng.randint(0, 999)
    return (
        f"{IMAGE_ENDPOINT}{prompt}"
        f"?width={IMAGE_WIDTH}&height={IMAGE_HEIGHT}&nologo=true&seed={seed}&model=flux"
    )
