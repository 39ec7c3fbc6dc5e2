import logging

import pytest

from zkcall.config import ZkCallConfig, configure_logging, load
from zkcall.errors import ZKCallError

_VARS = (
    "ZKCALL_RPC_URL",
    "ZKCALL_GROTH16_VERIFIER",
    "ZKCALL_PLONK_VERIFIER",
    "ZKCALL_VERIFIER_ABI",
    "ZKCALL_SNARKJS",
    "ZKCALL_LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    cfg = load()
    assert cfg == ZkCallConfig()
    assert cfg.rpc_url == "http://127.0.0.1:8545"
    assert cfg.snarkjs == "snarkjs"
    assert cfg.log_level == "INFO"


def test_from_env(clean_env):
    clean_env.setenv("ZKCALL_RPC_URL", "http://node:8545")
    clean_env.setenv("ZKCALL_PLONK_VERIFIER", "0xabc")
    clean_env.setenv("ZKCALL_VERIFIER_ABI", "~/Verifier.json")
    clean_env.setenv("ZKCALL_LOG_LEVEL", "debug")
    clean_env.setenv("ZKCALL_GROTH16_VERIFIER", "   ")
    cfg = load()
    assert cfg.rpc_url == "http://node:8545"
    assert cfg.verifier_address("plonk") == "0xabc"
    assert cfg.verifier_abi is not None and "~" not in str(cfg.verifier_abi)
    assert cfg.log_level == "DEBUG"
    with pytest.raises(ZKCallError):
        cfg.verifier_address("groth16")


def test_configure_logging_sets_package_level(clean_env):
    configure_logging("WARNING")
    assert logging.getLogger("zkcall").level == logging.WARNING
    configure_logging("nonsense")
    assert logging.getLogger("zkcall").level == logging.INFO
