from __future__ import annotations

from pathlib import Path


class OutputLayout:
    """Standardized output directory layout for a run.

    ``<root>/output/<name>/generation_<i>.<ext>`` holds one image per
    generation; ``<root>/statistics/<name>_statistics.txt`` holds the
    per-generation statistics lines.
    """

    OUTPUT_DIR = "output"
    STATISTICS_DIR = "statistics"
    IMAGE_PREFIX = "generation_"
    SUPPORTED_EXTENSIONS = ("png", "jpg", "jpeg", "bmp")

    def __init__(self, root: str | Path, name: str, extension: str = "png"):
        extension = extension.lower().lstrip(".")
        if extension not in self.SUPPORTED_EXTENSIONS:
            raise ValueError(
                f"Unsupported image extension '{extension}', "
                f"expected one of {self.SUPPORTED_EXTENSIONS}"
            )
        if not name:
            raise ValueError("Run name cannot be empty")
        self.root = Path(root)
        self.name = name
        self.extension = extension

    @property
    def images_dir(self) -> Path:
        return self.root / self.OUTPUT_DIR / self.name

    @property
    def statistics_path(self) -> Path:
        return self.root / self.STATISTICS_DIR / f"{self.name}_statistics.txt"

    def image_path(self, generation: int) -> Path:
        """Image file for *generation* (1-based)."""
        return self.images_dir / f"{self.IMAGE_PREFIX}{generation}.{self.extension}"

    def ensure(self) -> "OutputLayout":
        """Create the output directories (no-op when they exist)."""
        self.images_dir.mkdir(parents=True, exist_ok=True)
        self.statistics_path.parent.mkdir(parents=True, exist_ok=True)
        return self
