"""Send a plant image to a running PlantLens server and optionally save the PDF report."""
from __future__ import annotations

import argparse
import mimetypes
import sys
from pathlib import Path

import requests


def analyze(base_url: str, image_path: Path, timeout: float) -> dict:
    mime_type = mimetypes.guess_type(image_path.name)[0] or "application/octet-stream"
    with image_path.open("rb") as handle:
        response = requests.post(
            f"{base_url}/analyze",
            files={"image": (image_path.name, handle, mime_type)},
            timeout=timeout,
        )
    response.raise_for_status()
    return response.json()


def download_report(base_url: str, analysis: dict, destination: Path, timeout: float) -> None:
    response = requests.post(
        f"{base_url}/download",
        json={"result": analysis["results"], "image": analysis["image"]},
        timeout=timeout,
    )
    response.raise_for_status()
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(response.content)


def main() -> None:
    parser = argparse.ArgumentParser(description="Analyze a plant image with PlantLens")
    parser.add_argument("image", type=Path, help="Image file to upload")
    parser.add_argument("--url", default="http://localhost:5000", help="PlantLens base URL")
    parser.add_argument("--report", type=Path, help="Write the PDF report to this path")
    parser.add_argument("--timeout", type=float, default=120.0, help="Request timeout in seconds")
    args = parser.parse_args()

    if not args.image.is_file():
        parser.error(f"{args.image} does not exist")

    base_url = args.url.rstrip("/")
    try:
        analysis = analyze(base_url, args.image, args.timeout)
    except requests.HTTPError as exc:
        sys.exit(f"Analysis failed: {exc.response.status_code} {exc.response.text}")
    print(analysis["results"])

    if args.report:
        download_report(base_url, analysis, args.report, args.timeout)
        print(f"Report saved to {args.report}")


if __name__ == "__main__":
    main()
