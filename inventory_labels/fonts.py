"""
Font discovery on the host filesystem.

The engine only receives font bytes; this module supplies them by probing an
ordered list of candidate files per locale. The first existing file wins.
"""

# Standard Library
import pathlib

# local repo modules
import inventory_labels as invl
import inventory_labels.errors


FontUnavailableError = invl.errors.FontUnavailableError

# TrueType-outline fonts only; CFF-flavoured OpenType cannot be embedded
CJK_FONT_CANDIDATES = [
	"/usr/share/fonts/truetype/wqy/wqy-microhei.ttc",
	"/usr/share/fonts/truetype/wqy/wqy-zenhei.ttc",
	"/usr/share/fonts/wenquanyi/wqy-microhei/wqy-microhei.ttc",
	"/usr/share/fonts/truetype/arphic/uming.ttc",
	"/usr/share/fonts/truetype/droid/DroidSansFallbackFull.ttf",
	"/System/Library/Fonts/STHeiti Light.ttc",
	"/Library/Fonts/Arial Unicode.ttf",
	"C:/Windows/Fonts/msyh.ttc",
	"C:/Windows/Fonts/simhei.ttf",
	"C:/Windows/Fonts/simsun.ttc",
]
LATIN_FONT_CANDIDATES = [
	"/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
	"/usr/share/fonts/dejavu/DejaVuSans.ttf",
	"/Library/Fonts/Arial.ttf",
	"C:/Windows/Fonts/arial.ttf",
]
DEFAULT_CANDIDATES = {
	"zh": CJK_FONT_CANDIDATES,
	"ja": CJK_FONT_CANDIDATES,
	"ko": CJK_FONT_CANDIDATES,
	"default": LATIN_FONT_CANDIDATES,
}


class FontResolver:
	"""
	Resolve a locale to font bytes from an ordered candidate list.
	"""

	def __init__(self, candidates: dict[str, list[str]] | None = None) -> None:
		if candidates is None:
			candidates = DEFAULT_CANDIDATES
		self.candidates = {key.lower(): list(paths) for key, paths in candidates.items()}

	def candidates_for(self, locale: str) -> list[pathlib.Path]:
		"""
		Return candidate paths for a locale such as "zh-CN".
		"""
		language = (locale or "").replace("_", "-").split("-", 1)[0].lower()
		paths = self.candidates.get(language)
		if paths is None:
			paths = self.candidates.get("default", [])
		return [pathlib.Path(path) for path in paths]

	def resolve(self, locale: str) -> pathlib.Path:
		for path in self.candidates_for(locale):
			if path.is_file():
				return path
		raise FontUnavailableError(f"no font file found for locale {locale!r}")

	def load_font(self, locale: str) -> bytes:
		path = self.resolve(locale)
		return path.read_bytes()


#============================================
def font_loader_for_path(path: pathlib.Path):
	"""
	Build a loader that always returns one font file.

	Args:
		path: Font file path.

	Returns:
		Callable taking a locale and returning bytes or None.
	"""
	def load_font(locale: str) -> bytes | None:
		if not path.is_file():
			return None
		return path.read_bytes()

	return load_font
