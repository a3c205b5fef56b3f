"""
Example usage of backdrop package.

This script demonstrates how to remove the background of an image.
"""

import sys

import numpy as np

import backdrop as bd


def main():
    """Example usage of backdrop."""

    print("=== Backdrop Example ===")

    # Example 1: From an image file
    if len(sys.argv) > 1:
        print(f"\n1. Processing {sys.argv[1]}...")
        img = bd.Backdrop.from_file(sys.argv[1]).configure(show_progress=True)
        img.remove_background()
        print(f"Saved to {img.save()}")
    else:
        print("\n1. Pass an image path to process a file.")

    # Example 2: From an array
    print("\n2. Processing from array...")
    data = np.full((600, 400, 4), 255, dtype=np.uint8)
    data[150:450, 100:300, :3] = (30, 60, 200)

    token = bd.CancellationToken()
    result = bd.Backdrop.from_array(data, threshold=30, strip_height=200).remove_background(
        progress_callback=lambda p: print(f"Processing: {p}%"),
        cancel_token=token,
    )
    cleared = int((result[..., 3] == 0).sum())
    print(f"Transparent pixels: {cleared} of {result.shape[0] * result.shape[1]}")

    # Example 3: Edge mask only
    print("\n3. Edge mask...")
    mask = bd.Backdrop.from_array(data, threshold=30).edge_mask(chunk_size=256)
    print(f"Edge pixels: {int(mask.sum())}")


if __name__ == "__main__":
    main()
