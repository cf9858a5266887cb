# Stream a wordlist file one candidate at a time
# Line endings are stripped, empty lines are ignored, anything else is a word
from typing import Iterator


def iter_wordlist(path) -> Iterator[str]:
    with open(path, 'r', encoding='utf-8', errors='ignore') as f:
        for line in f:
            word = line.rstrip('\r\n')
            if word:
                yield word
