"""
Shared fixtures for the domain resolver tests.

The sample sources are small extracts of the real Public Suffix List and
IANA Root Zone Database covering plain, wildcard, exception, IDN and
private rules.
"""

import pytest
from hypothesis import HealthCheck, settings

from domain_resolver.converter import Converter
from domain_resolver.resolver import SuffixResolver


PSL_TEXT = """\
// This Source Code Form is subject to the terms of the Mozilla Public
// License, v. 2.0.

// ===BEGIN ICANN DOMAINS===

// ac : https://en.wikipedia.org/wiki/.ac
ac
com.ac
edu.ac

// ck : https://en.wikipedia.org/wiki/.ck
*.ck
!www.ck

// cn : https://en.wikipedia.org/wiki/.cn
cn
com.cn
公司.cn

// com : https://en.wikipedia.org/wiki/.com
com

// io : http://www.nic.io/rules.html
io
com.io

// jp : https://en.wikipedia.org/wiki/.jp
jp
co.jp
*.kawasaki.jp
!city.kawasaki.jp

// uk : https://en.wikipedia.org/wiki/.uk
uk
ac.uk
co.uk

// ===END ICANN DOMAINS===
// ===BEGIN PRIVATE DOMAINS===

// Google, Inc.
blogspot.com
blogspot.co.uk

// GitHub, Inc.
github.io

// ===END PRIVATE DOMAINS===
"""

RZD_TEXT = """\
# Version 2023090400, Last Updated Mon Sep  4 07:07:01 2023 UTC
AAA
AC
CK
CN
COM
IO
JP
UK
XN--55QX5D
"""

# Hypothesis builds its unicode charmap cache on first use, which can trip the
# input-generation speed health check on a cold run.
settings.register_profile("default", suppress_health_check=[HealthCheck.too_slow])
settings.load_profile("default")

ICANN_TLDS = ("ac", "ck", "cn", "com", "io", "jp", "uk")


@pytest.fixture(scope="session")
def psl_text() -> str:
    return PSL_TEXT


@pytest.fixture(scope="session")
def rzd_text() -> str:
    return RZD_TEXT


@pytest.fixture(scope="session")
def resolver() -> SuffixResolver:
    return SuffixResolver.from_text(PSL_TEXT)


@pytest.fixture(scope="session")
def root_zone():
    return Converter().convert_root_zone_database(RZD_TEXT)
