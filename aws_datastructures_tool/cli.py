"""CLI entry point for aws-datastructures-tool."""

import click

from aws_datastructures_tool.store.commands.geo_commands import (
    geoadd_command,
    geodist_command,
    geohash_command,
    geopos_command,
    georadius_command,
)
from aws_datastructures_tool.store.commands.hash_commands import (
    hdel_command,
    hexists_command,
    hget_command,
    hgetall_command,
    hincrby_command,
    hlen_command,
    hset_command,
    hsetnx_command,
)
from aws_datastructures_tool.store.commands.key_commands import del_command, exists_command
from aws_datastructures_tool.store.commands.list_commands import (
    lindex_command,
    llen_command,
    lpop_command,
    lpush_command,
    lpushx_command,
    lrange_command,
    lrem_command,
    lset_command,
    ltrim_command,
    rpop_command,
    rpoplpush_command,
    rpush_command,
    rpushx_command,
)
from aws_datastructures_tool.store.commands.set_commands import (
    sadd_command,
    scard_command,
    sdiff_command,
    sinter_command,
    sismember_command,
    smembers_command,
    smove_command,
    spop_command,
    srandmember_command,
    srem_command,
    sunion_command,
)
from aws_datastructures_tool.store.commands.sorted_set_commands import (
    zadd_command,
    zcard_command,
    zcount_command,
    zincrby_command,
    zinter_command,
    zlexcount_command,
    zpop_command,
    zrange_command,
    zrangebylex_command,
    zrangebyscore_command,
    zrank_command,
    zrem_command,
    zremrangebylex_command,
    zremrangebyrank_command,
    zremrangebyscore_command,
    zscore_command,
    zunion_command,
)
from aws_datastructures_tool.store.commands.table_commands import (
    create_table_command,
    drop_table_command,
)


@click.group()
@click.version_option(version="0.1.0")
def main() -> None:
    """Redis-style data structures on a single DynamoDB table"""
    pass


@main.group("store")
def store() -> None:
    """Lists, sets, sorted sets, hashes and geo sets stored in DynamoDB"""
    pass


# Register table commands
store.add_command(create_table_command)
store.add_command(drop_table_command)

# Register key commands
store.add_command(del_command)
store.add_command(exists_command)

# Register list commands
store.add_command(lpush_command)
store.add_command(rpush_command)
store.add_command(lpushx_command)
store.add_command(rpushx_command)
store.add_command(lpop_command)
store.add_command(rpop_command)
store.add_command(llen_command)
store.add_command(lrange_command)
store.add_command(lindex_command)
store.add_command(lset_command)
store.add_command(lrem_command)
store.add_command(ltrim_command)
store.add_command(rpoplpush_command)

# Register sorted set commands
store.add_command(zadd_command)
store.add_command(zscore_command)
store.add_command(zcard_command)
store.add_command(zcount_command)
store.add_command(zlexcount_command)
store.add_command(zincrby_command)
store.add_command(zrem_command)
store.add_command(zrange_command)
store.add_command(zrangebyscore_command)
store.add_command(zrangebylex_command)
store.add_command(zrank_command)
store.add_command(zpop_command)
store.add_command(zremrangebyrank_command)
store.add_command(zremrangebyscore_command)
store.add_command(zremrangebylex_command)
store.add_command(zunion_command)
store.add_command(zinter_command)

# Register set commands
store.add_command(sadd_command)
store.add_command(srem_command)
store.add_command(smembers_command)
store.add_command(sismember_command)
store.add_command(scard_command)
store.add_command(smove_command)
store.add_command(spop_command)
store.add_command(srandmember_command)
store.add_command(sunion_command)
store.add_command(sinter_command)
store.add_command(sdiff_command)

# Register hash commands
store.add_command(hset_command)
store.add_command(hsetnx_command)
store.add_command(hget_command)
store.add_command(hdel_command)
store.add_command(hexists_command)
store.add_command(hgetall_command)
store.add_command(hlen_command)
store.add_command(hincrby_command)

# Register geo commands
store.add_command(geoadd_command)
store.add_command(geopos_command)
store.add_command(geodist_command)
store.add_command(geohash_command)
store.add_command(georadius_command)

if __name__ == "__main__":
    main()
