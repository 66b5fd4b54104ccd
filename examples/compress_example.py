#!/usr/bin/env python3
"""
targz example - archives a small directory tree.

Builds this tree in a temporary directory:

    my_folder/
        empty/
        my_sub_folder/
            my_file.txt
            my_link -> <absolute path of my_file.txt>

then compresses my_folder into my_archive.tar.gz next to it and prints
the temporary directory so the result can be inspected with `tar tzvf`.
"""

import os
import sys
import tempfile

from targz import TargzError, compress


def create_example_data() -> tuple[str, str]:
    tmp_dir = tempfile.mkdtemp(prefix="targz-example")

    directory = os.path.join(tmp_dir, "my_folder")
    sub_directory = os.path.join(directory, "my_sub_folder")
    os.makedirs(sub_directory, 0o755)
    os.makedirs(os.path.join(directory, "empty"), 0o755)

    file_path = os.path.join(sub_directory, "my_file.txt")
    with open(file_path, "w") as f:
        f.write("example data\n")

    os.symlink(file_path, os.path.join(sub_directory, "my_link"))

    return tmp_dir, directory


def main() -> int:
    tmp_dir, dir_to_compress = create_example_data()

    try:
        summary = compress(dir_to_compress, os.path.join(tmp_dir, "my_archive.tar.gz"))
    except TargzError as e:
        print(f"Compress error: {e}", file=sys.stderr)
        return 1

    print(tmp_dir)
    print(f"[Done] {summary.entries} entries written to {summary.destination}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
