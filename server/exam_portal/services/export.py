"""
CSV export of exam results.
"""
import csv
import os
from typing import Mapping


def save_results_to_csv(file_path: str, results: Mapping[str, int]) -> str:
    """
    Write one ``username,score`` row per student.

    Raises OSError when the file cannot be written.
    """
    directory = os.path.dirname(file_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(file_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["username", "score"])
        for username, value in results.items():
            writer.writerow([username, value])
    return file_path
