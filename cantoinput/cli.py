"""
CantoInput 命令行工具
"""

import argparse
import sys

import orjson


def load_prefs(path: str) -> dict:
    """读取 JSON 偏好文件（method / charset / page_size ...）"""
    try:
        with open(path, 'rb') as f:
            prefs = orjson.loads(f.read())
    except (OSError, orjson.JSONDecodeError) as e:
        print(f"无法读取偏好文件 {path}: {e}", file=sys.stderr)
        return {}
    if not isinstance(prefs, dict):
        print(f"偏好文件格式错误（应为 JSON 对象）: {path}", file=sys.stderr)
        return {}
    return prefs


def build_config(args):
    from cantoinput.engine import EngineConfig

    prefs = load_prefs(args.prefs) if args.prefs else {}
    if args.method:
        prefs['method'] = args.method
    if args.charset:
        prefs['charset'] = args.charset
    if args.data_dir:
        prefs['data_dir'] = args.data_dir
    if args.phrases_first:
        prefs['phrases_first'] = True
    try:
        return EngineConfig.from_dict(prefs)
    except ValueError as e:
        print(f"配置错误: {e}", file=sys.stderr)
        return None


def cmd_query(args) -> int:
    from cantoinput.engine import create_engine, format_choices

    config = build_config(args)
    if config is None:
        return 1
    engine = create_engine(config)
    candidates = engine.resolve(args.buffer.lower())
    if candidates is None:
        print(f"{args.buffer}: 无匹配")
        return 1

    view = engine.paginate(candidates, args.page)
    print(f"{args.buffer} [{view.page_label}] {format_choices(view)}")
    if args.all:
        print(" ".join(candidates))
    return 0


def cmd_type(args) -> int:
    """逐字输入，打印上屏文字与最终的输入状态"""
    from cantoinput.engine import create_engine, format_choices, paginate

    config = build_config(args)
    if config is None:
        return 1
    engine = create_engine(config)
    text = []
    for ch in args.keys:
        out = engine.process_key(ch)
        if out.commit_text:
            text.append(out.commit_text)
        elif not out.consumed:
            text.append(ch)

    print(''.join(text))
    state = engine.state
    if state.input_buffer:
        view = paginate(state.candidates, state.page_index, engine.config.page_size)
        print(f"[{state.input_buffer}] {view.page_label} {format_choices(view)}")
    return 0


def main(argv=None):
    """命令行入口"""
    parser = argparse.ArgumentParser(
        prog="cantoinput",
        description="CantoInput - 粤语 / 普通话拼音输入法引擎",
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-m", "--method", choices=["yale", "jyutping", "pinyin"], help="输入方案")
    common.add_argument("-c", "--charset", choices=["traditional", "simplified"], help="输出字形")
    common.add_argument("--data-dir", help="数据目录（默认使用包内数据）")
    common.add_argument("--prefs", help="JSON 偏好文件")
    common.add_argument("--phrases-first", action="store_true", help="多字词排在单字之前")

    subparsers = parser.add_subparsers(dest="command", help="可用命令")

    # server 命令
    server_parser = subparsers.add_parser("server", help="启动 API 服务")
    server_parser.add_argument("--host", default="0.0.0.0", help="绑定地址 (默认: 0.0.0.0)")
    server_parser.add_argument("--port", type=int, default=3000, help="端口 (默认: 3000)")

    # query 命令
    query_parser = subparsers.add_parser("query", parents=[common], help="查询候选")
    query_parser.add_argument("buffer", help="拼音输入")
    query_parser.add_argument("-p", "--page", type=int, default=0, help="页码（从 0 开始）")
    query_parser.add_argument("-a", "--all", action="store_true", help="显示全部候选")

    # type 命令
    type_parser = subparsers.add_parser("type", parents=[common], help="模拟逐键输入")
    type_parser.add_argument("keys", help="按键序列，如 'neihou1'")

    # version 命令
    subparsers.add_parser("version", help="显示版本")

    args = parser.parse_args(argv)

    if args.command == "server":
        from cantoinput.api.server import main as server_main
        import os
        os.environ["HOST"] = args.host
        os.environ["PORT"] = str(args.port)
        server_main()

    elif args.command == "query":
        return cmd_query(args)

    elif args.command == "type":
        return cmd_type(args)

    elif args.command == "version":
        from cantoinput import __version__
        print(f"CantoInput v{__version__}")

    else:
        parser.print_help()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
