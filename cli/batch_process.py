import sys
import logging
import argparse
from pathlib import Path

from dotenv import load_dotenv
from tqdm import tqdm

# Load environment variables first
load_dotenv()

from models.target_color import TargetColor
from models.generation_config import GenerationConfig
from pipeline.background_remover import remove_background
from services.chroma_key_service import ChromaKeyService
from services.image_service import ImageService

logger = logging.getLogger(__name__)

OUTPUT_EXT = ".png"  # alpha channel needs PNG


def build_parser() -> argparse.ArgumentParser:
    config = GenerationConfig.from_env()
    parser = argparse.ArgumentParser(
        prog="sticker-keyer",
        description="Remove the solid green / blue backing color from a folder of sticker images.",
    )
    parser.add_argument("input_dir", type=Path, help="Folder with generated sticker images")
    parser.add_argument("output_dir", type=Path, help="Where the transparent PNGs are written")
    parser.add_argument("--sensitivity", "-s", type=int,
                        default=config.green_screen_sensitivity,
                        help="0-100, higher removes more (default: %(default)s)")
    parser.add_argument("--color", "-c", choices=[c.value for c in TargetColor],
                        default=config.mask_color.value,
                        help="Backing color to remove (default: %(default)s)")
    parser.add_argument("--recursive", "-r", action="store_true", help="Descend into sub-folders")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def output_path_for(src: Path, input_dir: Path, output_dir: Path) -> Path:
    """out/<relative dir>/<stem>.png for an input under input_dir."""
    return output_dir / src.relative_to(input_dir).with_suffix(OUTPUT_EXT)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )

    if not args.input_dir.is_dir():
        logger.error(f"Input folder not found: {args.input_dir}")
        return 1

    image_service = ImageService()
    chroma_key_service = ChromaKeyService()
    args.output_dir.mkdir(parents=True, exist_ok=True)

    written = 0
    seen = set()
    gallery = image_service.stream_gallery(args.input_dir, recursive=args.recursive)
    for img in tqdm(gallery, desc="keying", ncols=70, unit="img"):
        # Output tree mirrors the input tree
        out_path = output_path_for(img.path, args.input_dir, args.output_dir)
        if out_path in seen:
            logger.warning(f"Skipping {img.path}: {out_path} was already written by another input")
            continue
        seen.add(out_path)

        remove_background([img], sensitivity=args.sensitivity, color=args.color,
                          chroma_key_service=chroma_key_service, image_service=image_service)
        image_service.save(img, out_path)
        written += 1
        logger.debug(f"Wrote {out_path}")

    logger.info(f"Keyed {written} images ({args.color}, sensitivity={args.sensitivity}) -> {args.output_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
