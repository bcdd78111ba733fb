"""OCR pipeline for scanned images, run through the command chain."""
from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from paperless.chain.errors import ErrorList
from paperless.chain.links.chain import CmdChain, run_cmd_chain
from paperless.chain.models import Status
from paperless.chain.runtime import ChainRuntime, to_dict
from paperless.chain.script import parse_script
from paperless.image.models import Image

logger = logging.getLogger(__name__)

DEFAULT_SCRIPT = """
unpaper --version
convert -version
tesseract --version

convert -depth 8 $input pnm:$tmpUnpaper.pnm

unpaper -vv -s a4 -l single -dv 3.0 -dr 80.0 --overwrite $tmpUnpaper.pnm $tmpConvert

convert -normalize -colorspace Gray pnm:$tmpConvert pnm:$tmpTesseract

tesseract -l $language --psm 1 $tmpTesseract stdout > $contents

convert -trim -quality 80% +repage -type optimize pnm:$tmpConvert $cleanout

convert -trim -quality 80% +repage -type optimize -thumbnail 200x200> pnm:$tmpConvert $thumbout
"""

DEFAULT_ALLOWED_COMMANDS = ("convert", "unpaper", "tesseract", "file", "cat")


class ImagePipeline:
    """Runs the OCR script for images stored under a destination directory.

    Script placeholders bound per image: ``input`` (the original upload),
    ``contents`` (OCR text), ``cleanout`` (cleaned image), ``thumbout``
    (thumbnail) and ``language`` (tesseract language).
    """

    def __init__(
        self,
        config: Optional[Any] = None,
        runtime: Optional[ChainRuntime] = None,
        script: str = DEFAULT_SCRIPT,
    ) -> None:
        cfg = to_dict(config)
        self.runtime = runtime or ChainRuntime()
        self.script_name = str(cfg.get("script_name", "default"))
        self.language = str(cfg.get("language", "fin"))
        allowed = cfg.get("allowed_commands", DEFAULT_ALLOWED_COMMANDS)
        self.allowed_commands = None if allowed is None else [str(item) for item in allowed]
        self.script = script
        self._chain: Optional[CmdChain] = None

    @classmethod
    def from_global_config(cls) -> "ImagePipeline":
        try:
            from paperless.utils.hydra_config.init import conf  # type: ignore
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("loading the packaged configuration failed, using defaults: %s", exc)
            return cls()
        return cls(conf.get("image"), runtime=ChainRuntime(conf.get("chain")))

    @property
    def chain(self) -> CmdChain:
        if self._chain is None:
            self._chain = parse_script(self.script, allowed_commands=self.allowed_commands)
        return self._chain

    def constants_for(self, img: Image, destdir: str) -> Dict[str, str]:
        return {
            "input": img.orig_file(destdir),
            "contents": img.txt_file(destdir),
            "cleanout": img.clean_file(destdir),
            "thumbout": img.thumb_file(destdir),
            "language": self.language,
        }

    def process(self, img: Image, destdir: str) -> None:
        """Run the script for ``img`` and store its log and text on it.

        Partially written outputs are left in place when the script fails;
        :func:`delete_image_files` removes them.
        """
        status = self._status_for(self.chain, img, destdir)
        try:
            run_cmd_chain(self.chain, status)
        finally:
            img.process_log = status.log.getvalue().decode("utf-8", errors="replace")
        self._load_text(img, destdir)

    def process_many(self, images: Iterable[Image], destdir: str) -> List[Optional[BaseException]]:
        """Process several images concurrently through a fresh pool.

        Returns, per image, ``None`` or the exception its chain raised.
        """
        images = list(images)
        jobs = []
        for img in images:
            chain = parse_script(self.script, allowed_commands=self.allowed_commands)
            jobs.append((chain, self._status_for(chain, img, destdir)))

        results = self.runtime.create_pool().run_sync(jobs)
        for img, (_, status), error in zip(images, jobs, results):
            img.process_log = status.log.getvalue().decode("utf-8", errors="replace")
            if error is None:
                self._load_text(img, destdir)
        return results

    def _status_for(self, chain: CmdChain, img: Image, destdir: str) -> Status:
        status = self.runtime.status_for(
            chain,
            self.constants_for(img, destdir),
            allowed_commands=self.allowed_commands,
        )
        status.write_log(f"# Running the script named: {self.script_name}\n")
        return status

    def _load_text(self, img: Image, destdir: str) -> None:
        # tesseract leaves no text file for pages without text
        try:
            with open(img.txt_file(destdir), encoding="utf-8", errors="replace") as handle:
                img.text = handle.read()
        except FileNotFoundError:
            img.text = ""
        img.interpret_date = datetime.now(timezone.utc)


def delete_image_files(img: Image, destdir: str, include_original: bool = False) -> None:
    """Remove the files produced for ``img``; missing files are ignored."""
    files = img.output_files(destdir)
    if include_original:
        files.insert(0, img.orig_file(destdir))

    errors = []
    for path in files:
        try:
            os.remove(path)
        except FileNotFoundError:
            continue
        except OSError as exc:
            errors.append(exc)
    if errors:
        raise ErrorList("deleting image files failed", errors)


__all__ = ["DEFAULT_ALLOWED_COMMANDS", "DEFAULT_SCRIPT", "ImagePipeline", "delete_image_files"]
