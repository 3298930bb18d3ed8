"""AWS Lambda handler for chapter splitting (SQS trigger).

Receives SQS events naming a course folder in S3, downloads the folder
(videos + one timestamp text file), splits every video by chapter through
the ``chapter_split`` pipeline, and uploads the results.

SQS message body format::

    {
        "courseId": "bjj-armbars",
        "prefix": "courses/bjj-armbars",
        "singleVolume": false        // optional
    }

Outputs land in ``s3://$DEST_BUCKET/chapters/<courseId>/``.

SAM entry point: ``handler.handler``
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any

from s3_utils import download_prefix, upload_directory_to_s3
from chapter_split import SplitConfig, process_folder
from chapter_split.ffmpeg_utils import check_dependencies

logger = logging.getLogger()
logger.setLevel(logging.INFO)

SOURCE_BUCKET = os.environ.get("SOURCE_BUCKET", "chapter-uploads")
DEST_BUCKET = os.environ.get("DEST_BUCKET", "chapter-exports")


# ---------------------------------------------------------------------------
# Lambda entry point
# ---------------------------------------------------------------------------

def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Lambda handler for SQS batch events.

    Processes each SQS record independently.  Failed records are returned
    in ``batchItemFailures`` so SQS can retry them without reprocessing
    the entire batch.
    """
    logger.info("Received event: %s", json.dumps(event, indent=2))

    batch_item_failures: list[dict[str, str]] = []

    for record in event["Records"]:
        message_id = record["messageId"]

        try:
            message = json.loads(record["body"])
            course_id = message.get("courseId")
            prefix = message.get("prefix")

            if not all([course_id, prefix]):
                raise ValueError("Missing required fields: courseId, prefix")

            _process_course(
                course_id=course_id,
                prefix=prefix,
                single_volume=bool(message.get("singleVolume", False)),
            )

        except Exception as e:
            logger.error(
                "Error processing message %s: %s", message_id, e, exc_info=True,
            )
            batch_item_failures.append({"itemIdentifier": message_id})

    return {"batchItemFailures": batch_item_failures}


# ---------------------------------------------------------------------------
# Internal orchestration
# ---------------------------------------------------------------------------

def _process_course(
    *,
    course_id: str,
    prefix: str,
    single_volume: bool = False,
) -> str:
    """Download, split, and upload a single course folder.

    Returns the S3 output prefix (e.g. ``chapters/{courseId}``).
    """
    check_dependencies()

    work_dir = Path(tempfile.mkdtemp(prefix="chapters-"))

    try:
        course_dir = work_dir / course_id
        export_dir = work_dir / "export"
        export_dir.mkdir()

        logger.info("Processing course: courseId=%s, prefix=%s", course_id, prefix)

        # 1. Download the course folder from S3
        download_prefix(SOURCE_BUCKET, prefix, course_dir)

        # 2. Run the chapter pipeline
        config = SplitConfig(export_dir=export_dir)
        result = process_folder(course_dir, config, single_volume=single_volume)
        for warning in result.warnings:
            logger.warning("%s: %s", course_id, warning)

        # 3. Upload all outputs to S3
        output_prefix = f"chapters/{course_id}"
        upload_directory_to_s3(DEST_BUCKET, output_prefix, export_dir)

        logger.info("Successfully processed course: %s (%d files)", course_id, len(result.outputs))
        return output_prefix

    finally:
        shutil.rmtree(work_dir, ignore_errors=True)
        logger.info("Cleaned up working directory: %s", work_dir)
