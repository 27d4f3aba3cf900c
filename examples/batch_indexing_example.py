"""索引批次构建与提交示例.

本文件展示了如何使用 IndexBatch 构建混合操作批次，通过 DocumentIndexer 提交，
并在部分失败时提取重试批次。
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from elasticsearch import Elasticsearch

from indexflow.batch import IndexAction, IndexBatch
from indexflow.document import Document, GeoPoint, document_field
from indexflow.indexing import DocumentIndexer, IndexBatchError
from indexflow.transport import ElasticsearchTransport, InMemoryIndexTransport


@dataclass
class Hotel:
    hotel_id: str | None = document_field(name="hotelId", key=True, default=None)
    hotel_name: str | None = document_field(name="hotelName", default=None)
    rating: int | None = None
    location: GeoPoint | None = None


# ==================== 示例1：混合操作批次 ====================
def example_mixed_batch():
    """在一个批次中上传、合并和删除文档."""
    transport = InMemoryIndexTransport(key_field="hotelId")
    indexer = DocumentIndexer(transport)

    batch = IndexBatch.new(
        [
            IndexAction.upload(
                Document({"hotelId": "1", "hotelName": "Fancy Stay", "rating": 5}),
                key_field="hotelId",
            ),
            IndexAction.upload(Document({"hotelId": "2"}), key_field="hotelId"),
            # 文档 3 不存在，合并操作会单独失败
            IndexAction.merge(Document({"hotelId": "3", "rating": 4}), key_field="hotelId"),
            IndexAction.delete_key("hotelId", "4"),
            IndexAction.merge_or_upload(Document({"hotelId": "5"}), key_field="hotelId"),
        ]
    )

    try:
        indexer.index(batch)
    except IndexBatchError as e:
        print(f"部分失败: {len(e.failed_results)}/{len(e.results)}")
        for result in e.failed_results:
            print(f"  key={result.key}, error={result.error_message}")

        retry = e.find_failed_actions_to_retry(batch, "hotelId")
        print(f"重试批次: {retry}")

        # 补齐缺失的文档后重试
        indexer.index(IndexBatch.upload([Document({"hotelId": "3"})], key_field="hotelId"))
        result = indexer.index(retry)
        print(f"重试结果: 成功={result.succeeded}")

    print(f"文档总数: {transport.count()}")


# ==================== 示例2：类型化记录 ====================
def example_typed_records():
    """使用 dataclass 记录构建批次，并以结果类型处理部分失败."""
    transport = InMemoryIndexTransport(key_field="hotelId")
    indexer = DocumentIndexer(transport)

    hotels = [
        Hotel(
            hotel_id="1",
            hotel_name="Secret Point Motel",
            rating=4,
            location=GeoPoint(lat=40.760586, lon=-73.975403),
        ),
        Hotel(hotel_id="2", hotel_name="Twin Dome Motel", rating=3),
    ]
    indexer.index(IndexBatch.upload(hotels))

    result = indexer.submit(IndexBatch.merge([Hotel(hotel_id="2", rating=5), Hotel(hotel_id="9")]))
    if result.is_partial_failure:
        retry = result.find_failed_actions_to_retry(lambda hotel: hotel.hotel_id)
        print(f"需要重试的记录: {[action.document for action in retry]}")

    print(f"文档 2: {transport.get('2')}")


# ==================== 示例3：提交到 Elasticsearch ====================
def example_elasticsearch():
    """通过 bulk API 提交批次到 Elasticsearch."""
    es_client = Elasticsearch(["http://localhost:9200"])
    indexer = DocumentIndexer(ElasticsearchTransport(es_client, "hotels", refresh="wait_for"))
    indexer.set_config(raise_on_partial_failure=False)

    pst = timezone(timedelta(hours=-8))
    batch = IndexBatch.merge_or_upload(
        [
            Document({"hotelId": "1", "lastRenovationDate": datetime(2010, 6, 27, tzinfo=pst)}),
            Document({"hotelId": "2", "tags": ["pool", "view"]}),
        ],
        key_field="hotelId",
    )

    result = indexer.index(batch)
    print(f"状态码: {result.status_code}, 成功: {result.succeeded}")
    return result


# ==================== 主函数 ====================
def main():
    """运行所有示例."""
    print("=" * 50)
    print("索引批次示例")
    print("=" * 50)

    print("\n1. 混合操作批次示例")
    print("-" * 50)
    example_mixed_batch()

    print("\n2. 类型化记录示例")
    print("-" * 50)
    example_typed_records()

    print("\n3. Elasticsearch 示例")
    print("-" * 50)
    # 取消注释以下代码以运行 Elasticsearch 示例
    # example_elasticsearch()

    print("\n" + "=" * 50)
    print("所有示例运行完成！")
    print("=" * 50)


if __name__ == "__main__":
    main()
