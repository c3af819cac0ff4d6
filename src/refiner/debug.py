import json
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Optional

from refiner.domain.models import GeneratedImage, RefinedPrompt


def dump_refinement(
    refined: RefinedPrompt,
    image: Optional[GeneratedImage] = None,
    out_dir: str | Path = "logs/refinements",
) -> str:
    """
    Persist one pipeline run for later inspection.

    Args:
        refined: The refined prompt, including raw and suppressed keywords.
        image: The generated image, if generation ran.
        out_dir: Directory to write into. Created if missing.

    Returns:
        Path of the written JSON file.
    """
    Path(out_dir).mkdir(parents=True, exist_ok=True)
    time_string = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    path = Path(out_dir) / f"{time_string}.json"

    payload = {
        "prompt": refined.prompt,
        "raw_keywords": list(refined.raw_keywords),
        "keywords": list(refined.keywords),
        "suppressed": [asdict(s) for s in refined.suppressed],
        "refined_prompt": refined.refined_prompt,
        "image": asdict(image) if image is not None else None,
        "timestamp": time_string,
    }

    path.write_text(
        json.dumps(payload, indent=2, ensure_ascii=False),
        encoding="utf-8",
    )

    return str(path)
