"""
Spartan E2E 데모: a · b = c (a = 3, b = 5)
=============================================

이 스크립트는 Spartan NIZK와 SNARK의 전체 흐름을 시연한다.

실행:
    python -m zkp.spartan.example

흐름:
    1. 회로 구성 (제약 6개 / 변수 11개)
    2. 파라미터 생성 (신뢰 설정 없음)
    3. NIZK 증명 생성 및 검증
    4. SNARK 인덱싱 (희소 행렬 커밋)
    5. SNARK 증명 생성 및 검증
    6. 잘못된 공개 입력으로 검증
"""

from zkp.spartan.circuits import multiply_circuit
from zkp.spartan import nizk, snark


def main():
    print("=" * 60)
    print("  Spartan Zero-Knowledge Proof Demo")
    print("  회로: a · b = c (a = 3, b = 5)")
    print("=" * 60)

    # ── 1. 회로 구성 ──
    print("\n[1] 회로 구성...")
    a, b = 3, 5
    cs = multiply_circuit(a, b, num_constraints=6, num_variables=11)
    instance = cs.to_instance()
    assignment = cs.assignment()
    c = int(assignment.inputs[0])
    print(f"    제약 수 (패딩): {instance.num_constraints}")
    print(f"    비공개 변수: {instance.num_aux}, t = {instance.num_vars}")
    print(f"    행렬당 비영 항목 (패딩): {instance.num_nz_entries}")
    print(f"    공개 입력: [{c}]")
    print(f"    만족 여부: {'✓' if assignment.is_satisfied(instance) else '✗'}")

    # ── 2. 파라미터 생성 ──
    print("\n[2] 파라미터 생성 (hash-to-curve 생성자)...")
    nizk_params = nizk.generate_parameters(instance)
    snark_params = snark.generate_parameters(instance)
    pc = nizk_params.pc_params
    print(f"    증인 다항식 변수 수: {pc.num_vars} ({pc.num_rows} × {pc.row_size})")

    # ── 3. NIZK ──
    print("\n[3] NIZK 증명 생성 및 검증...")
    nizk_proof = nizk.create_proof(nizk_params, instance, assignment)
    nizk_ok = nizk.nizk_verify(nizk_params, instance, [c], nizk_proof)
    print(f"    합검사 라운드: {len(nizk_proof.rx)} + {len(nizk_proof.ry)}")
    print(f"    검증 결과: {'성공 ✓' if nizk_ok else '실패 ✗'}")

    # ── 4. SNARK 인덱싱 ──
    print("\n[4] SNARK 인덱싱...")
    enc, encode_commit = snark.encode(snark_params, instance)
    print(f"    n = {encode_commit.n}, m = {encode_commit.m}")
    print(f"    ops 커밋먼트 행 수: {len(encode_commit.ops_commit)}")
    print(f"    mem 커밋먼트 행 수: {len(encode_commit.mem_commit)}")

    # ── 5. SNARK ──
    print("\n[5] SNARK 증명 생성 및 검증...")
    snark_proof = snark.create_proof(snark_params, instance, assignment, enc)
    snark_ok = snark.snark_verify(snark_params, instance, [c], snark_proof, encode_commit)
    print(f"    Ã, B̃, C̃ (rx, ry) = {[int(e) % 10**6 for e in snark_proof.matrix_evals]} (mod 10⁶)")
    print(f"    검증 결과: {'성공 ✓' if snark_ok else '실패 ✗'}")

    # ── 6. 잘못된 공개 입력 ──
    # c 대신 a를 공개 입력으로 주면 두 검증 모두 실패해야 한다.
    print(f"\n[6] 잘못된 공개 입력 [{a}] 으로 검증...")
    nizk_wrong = nizk.nizk_verify(nizk_params, instance, [a], nizk_proof)
    snark_wrong = snark.snark_verify(snark_params, instance, [a], snark_proof, encode_commit)
    print(f"    NIZK:  {'성공 ✓' if nizk_wrong else '실패 ✗ (예상대로 실패)'}")
    print(f"    SNARK: {'성공 ✓' if snark_wrong else '실패 ✗ (예상대로 실패)'}")

    ok = nizk_ok and snark_ok and not nizk_wrong and not snark_wrong
    print("\n" + "=" * 60)
    if ok:
        print("  데모 완료: 모든 테스트 통과!")
    else:
        print("  데모 완료: 일부 테스트 실패")
    print("=" * 60)

    return ok


if __name__ == "__main__":
    main()
