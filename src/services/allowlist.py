"""
Account domain allowlist utilities.

The allowlist is a plain text file with one organization domain per line.
Entries are compared literally against the domains of email addresses, so
no normalization happens on load. `convert_homepages` turns a list of
homepage URLs into such a file.
"""

import logging
from typing import Optional, Set

from domain.errors import ResourceError

logger = logging.getLogger(__name__)


def load_allowlist(path: str) -> Set[str]:
    """
    Load account domains from a newline-delimited file.

    Args:
        path: Path to the allowlist file

    Returns:
        Set of domains (blank lines skipped, duplicates collapsed)

    Raises:
        ResourceError: If the file cannot be opened or read
    """
    domains = set()
    try:
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            for line in f:
                domain = line.strip()
                if domain:
                    domains.add(domain)
    except OSError as e:
        logger.error(f"Failed to load allowlist {path}: {e}")
        raise ResourceError(path, f"cannot read allowlist: {e.strerror or e}") from e

    logger.info(f"Loaded {len(domains)} account domains from {path}")
    return domains


def domain_from_homepage(line: str) -> Optional[str]:
    """
    Extract a bare domain from a homepage URL.

    Example:
        >>> domain_from_homepage("https://www.Example.com/about")
        'example.com'

    Returns:
        The domain, or None if the line holds no usable domain
    """
    line = line.strip().lower()
    if not line:
        return None

    parts = line.split('//')
    if len(parts) == 2:
        line = parts[1]
    if line.startswith('http'):
        return None

    # Mobile and www hosts share the organization's domain
    if line.startswith('www'):
        line = line.split('.', 1)[1] if '.' in line else ''
    if line.startswith('m.'):
        line = line.split('.', 1)[1]

    line = line.split('/', 1)[0]
    if not line or '.' not in line:
        return None
    return line


def convert_homepages(homepages_path: str, domains_path: str) -> int:
    """
    Convert a file of homepage URLs into an allowlist file.

    Args:
        homepages_path: Input file, one URL per line
        domains_path: Output allowlist file (truncated first)

    Returns:
        Number of domains written

    Raises:
        ResourceError: If either file cannot be opened
    """
    try:
        infile = open(homepages_path, 'r', encoding='utf-8', errors='replace')
    except OSError as e:
        raise ResourceError(homepages_path, f"cannot read homepages: {e.strerror or e}") from e

    written = 0
    with infile:
        try:
            outfile = open(domains_path, 'w', encoding='utf-8', newline='')
        except OSError as e:
            raise ResourceError(domains_path, f"cannot create domains file: {e.strerror or e}") from e

        with outfile:
            for line in infile:
                domain = domain_from_homepage(line)
                if not domain:
                    continue
                outfile.write(domain + '\n')
                logger.debug(f"Converted homepage to domain: {domain}")
                written += 1

    logger.info(f"Wrote {written} domains to {domains_path}")
    return written
