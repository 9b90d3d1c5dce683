#!/usr/bin/env python3
"""R2 Uploader - エントリーポイント"""
import sys

from r2_uploader import Config, R2Uploader
from r2_uploader.core.s3_client import S3ClientPool
from r2_uploader.errors import UploadAbortedError
from r2_uploader.models.config import LoggingConfig
from r2_uploader.models.result import RunSummary
from r2_uploader.utils.logger import LoggerManager
from r2_uploader.utils.outputs import mask_secrets, write_outputs


def load_config(argv) -> Config:
    """引数に設定ファイルがあればそれを、なければ環境変数を読む"""
    if argv:
        return Config.from_file(argv[0])
    return Config.from_env()


def main(argv=None) -> int:
    """メイン関数"""
    if argv is None:
        argv = sys.argv[1:]

    try:
        config = load_config(argv)
    except Exception as e:
        # 設定が読めない場合も result=failure を出力する
        LoggerManager.setup(LoggingConfig())
        write_outputs(RunSummary(failed=1), include_urls=False)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    mask_secrets([
        config.r2.account_id,
        config.r2.access_key_id,
        config.r2.secret_access_key,
    ])
    LoggerManager.setup(config.logging)
    include_urls = config.options.output_file_url

    try:
        pool = S3ClientPool.build(config.r2, config.options.pool_size, config.options)
        summary = R2Uploader(config, pool).run()
    except UploadAbortedError as e:
        write_outputs(e.summary, include_urls=False)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        write_outputs(RunSummary(failed=1), include_urls=False)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    write_outputs(summary, include_urls=include_urls)

    # 終了コードを設定
    if not summary.succeeded:
        for outcome in summary.failures:
            print(f"Error: {outcome.error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
