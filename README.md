# diskscan

`diskscan` walks a directory tree concurrently with `asyncio`. It counts the
files and directories under a root, adds up the file sizes, and can list the
files whose names match a regular expression.

## Installation

```
pip install .
```

## Command line

```
diskscan PATH [options]
```

The same command can be started with `python -m diskscan.cli PATH [options]`.

Options:

- `-j`, `--json`: turns off the progress spinner (see "Limits" below)
- `-q`, `--quiet`: turns off the progress spinner
- `-v`, `--verbose`: print each directory and entry as it is read, and list
  the errors collected during the scan after the totals
- `-t NUM`, `--threads NUM`: the most directories read at once (default:
  twice the CPU count; `0` is rejected by the scanner and reported as an error)
- `--no-hidden`: skip files and directories whose names start with `.`
- `--follow-symlinks`: follow symbolic links to files and directories
- `--timeout SECONDS`: accepted, but see "Limits" below
- `-p PATTERN`, `--pattern PATTERN`: a regular expression searched for in each
  file name; matching files are listed after the totals
- `-V`, `--version`: print the version and exit

Example:

```
diskscan ~/projects --no-hidden --pattern '\.py$'
```

The command first prints the configuration it is about to use, then the total
number of files, the total number of directories (the root included) and how
long the scan took, followed by any matching files. While scanning, a spinner
with the running item count and size is drawn on stderr when stderr is a
terminal; without the spinner, the line `Scanner Engine: Scan complete.` is
printed when the walk ends.

If the pattern is not a valid regular expression, `diskscan` prints a warning
on stderr and scans without filtering. If the path is missing or is not a
directory, the error is printed on stderr. Errors met while reading entries
during the scan are collected and do not stop it; `--verbose` lists them.

## Library use

```python
import asyncio
import re

from diskscan.scanner import ScannerConfig, run_scan

config = ScannerConfig(
    target_path="/var/log",
    max_concurrent_tasks=8,
    follow_symlinks=False,
    include_hidden=True,
    progress_updates=False,
    verbose=False,
    file_pattern=re.compile(r"\.log$"),
)
result = asyncio.run(run_scan(config))
print(result.total_files, result.total_directories, result.total_size)
print(f"{result.scan_duration:.3f} s")
for path in result.matching_files:
    print(path)
```

`ScannerConfig` defaults to twice the CPU count for `max_concurrent_tasks`,
with progress updates on, hidden entries included and symbolic links not
followed.

`run_scan` raises `ScanNotADirectoryError` or `ScanIOError` (both subclasses
of `ScanError`, with the offending path in `.path`) when the root cannot be
scanned, and `ValueError` when `max_concurrent_tasks` is below one. Failures
further down the tree go into `ScanResult.errors` as `ScanIOError` or
`ScanMetadataError` and do not stop the scan.

`diskscan.progress` holds the spinner: `ProgressReporter.run(queue)` reads
`ProgressUpdate` items from an `asyncio.Queue` until a completion update
arrives. `diskscan.progress.human_bytes` formats a byte count with binary
prefixes, for example `1.50 KiB`.

## Limits

- `--json` does not produce JSON: the summary is printed as plain text either
  way, and the option only turns off the spinner.
- `--timeout` is parsed but not enforced; a scan runs until the whole tree has
  been walked.
- The command line prints counts and duration but not the total size; use
  `ScanResult.total_size` from the library for that.