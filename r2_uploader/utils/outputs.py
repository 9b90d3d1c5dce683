"""実行結果の出力 (GitHub Actions の outputs)"""
import json
import os
import uuid
from contextlib import contextmanager
from typing import Dict, Iterable, Mapping, Optional

from ..models.result import RunSummary
from .logger import LoggerManager


def _format_output(name: str, value: str) -> str:
    if "\n" not in value:
        return f"{name}={value}\n"
    # 複数行の値はヒアドキュメント形式
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


def build_outputs(summary: RunSummary, include_urls: bool) -> Dict[str, str]:
    outputs = {"result": summary.result}
    if include_urls:
        outputs["file-urls"] = json.dumps(summary.urls, sort_keys=True)
    return outputs


def write_outputs(summary: RunSummary, include_urls: bool = False,
                  environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """result と file-urls を書き出す

    $GITHUB_OUTPUT が設定されていればそのファイルに追記し、なければログに出す。
    """
    if environ is None:
        environ = os.environ

    logger = LoggerManager.get_logger()
    outputs = build_outputs(summary, include_urls)
    output_file = environ.get("GITHUB_OUTPUT")

    if output_file:
        with open(output_file, "a", encoding="utf-8") as file:
            for name, value in outputs.items():
                file.write(_format_output(name, value))
        logger.debug(f"Wrote outputs to {output_file}")
    else:
        for name, value in outputs.items():
            logger.info(f"Output {name}: {value}")

    return outputs


def mask_secrets(values: Iterable[str], environ: Optional[Mapping[str, str]] = None):
    """GitHub Actions のログで秘密情報をマスク"""
    if environ is None:
        environ = os.environ
    if environ.get("GITHUB_ACTIONS") != "true":
        return
    for value in values:
        if value:
            print(f"::add-mask::{value}", flush=True)


@contextmanager
def actions_group(title: str, enabled: bool = True):
    """GitHub Actions のログを折りたたみグループにまとめる"""
    if enabled:
        print(f"::group::{title}", flush=True)
    try:
        yield
    finally:
        if enabled:
            print("::endgroup::", flush=True)
