# pylint: disable=missing-module-docstring,redefined-outer-name
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import pathlib

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
import pytest

from capiblob.rsa import RSAPrivKey
from capiblob.rsa import RSAPubKey

TARGET_SIZES = [1024, 2048, pytest.param(4096, marks=pytest.mark.slow)]
e = 65537


@pytest.fixture(scope="session", params=TARGET_SIZES)
def keyset(request) -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=e, key_size=request.param)


@pytest.fixture(scope="session")
def key1024() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=e, key_size=1024)


@pytest.fixture(scope="module", params=[True, False])
def crt(request) -> bool:
    return request.param


def localize_keys(pk: rsa.RSAPrivateKey, crt: bool = True) -> tuple[RSAPubKey, RSAPrivKey]:
    privs = pk.private_numbers()
    pubs = pk.public_key().public_numbers()
    if crt:
        pkey = RSAPrivKey(pubs.n, pubs.e, privs.d, privs.p, privs.q, privs.dmp1, privs.dmq1, privs.iqmp)
    else:
        pkey = RSAPrivKey(pubs.n, pubs.e, privs.d)
    return RSAPubKey(pubs.n, pubs.e), pkey


@pytest.fixture
def localize():
    return localize_keys


def dump_pem(pk: rsa.RSAPrivateKey, folder: pathlib.Path) -> tuple[pathlib.Path, pathlib.Path]:
    """Writes the PKCS1 public and PKCS8 private PEM files of a key, returning (public, private)."""
    pub_file = folder / "key.pub"
    priv_file = folder / "key.pem"
    pub_file.write_bytes(pk.public_key().public_bytes(serialization.Encoding.PEM, serialization.PublicFormat.PKCS1))
    priv_file.write_bytes(
        pk.private_bytes(serialization.Encoding.PEM, serialization.PrivateFormat.PKCS8, serialization.NoEncryption()))
    return pub_file, priv_file


@pytest.fixture
def pem_files():
    return dump_pem
